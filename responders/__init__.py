"""
Auto-responder system - split into focused modules.

This package handles rule loading, matching, cooldowns and replies for
incoming messages.
"""
from .engine import AutoResponderEngine
from .matching import build_matcher, passes_where
from .config_loader import load_rules_file, normalize_config
from .cooldowns import CooldownTracker
from .rendering import pick_reply, render_template
from .watcher import RulesWatcher

__all__ = [
    "AutoResponderEngine",
    "build_matcher",
    "passes_where",
    "load_rules_file",
    "normalize_config",
    "CooldownTracker",
    "pick_reply",
    "render_template",
    "RulesWatcher",
]
