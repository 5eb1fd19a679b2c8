"""Configuration loading: defaults, optional JSON file and environment overrides"""

import copy
import json
import os
import sys

import appdirs

APP_NAME = "lyrplay"
CONFIG_FILES = ["config.json"]

DEFAULT_CONFIG = {
	"global": {
		"logs_dir": appdirs.user_log_dir(APP_NAME),
		"log_file": "application.log",
		"log_level": "WARN",
		"debug_log": "debug.log",
		"max_debug_count": 100,
		"max_log_count": 100,
		"enable_debug": {"env": "DEBUG", "default": "0"}
	},
	"ui": {
		"tick_ms": 50,
		"scroll_interval_ms": 200,
		"scroll_hold_ticks": 10,
		"scroll_separator": "   ",
		"status_message_sec": 2,
		"min_width": 100,
		"min_height": 28,
		"colors": {
			"active": {"env": "LYRPLAY_ACTIVE", "default": "green"},
			"inactive": {"env": "LYRPLAY_INACTIVE", "default": "white"},
			"error": {"env": "LYRPLAY_ERROR", "default": "red"}
		}
	},
	"sync": {
		"drift_threshold_ms": 250,
		"offset_step_sec": 0.1,
		"offset_jump_sec": 5.0
	},
	"key_bindings": {
		"quit": ["q", "Q"],
		"play": ["g", "G"],
		"pause": ["b", "B"],
		"toggle_pause": [" "],
		"mute": ["v", "V"],
		"volume_up": ["=", "+"],
		"volume_down": ["-", "_"],
		"time_decrease": [","],
		"time_increase": ["."],
		"time_jump_decrease": ["["],
		"time_jump_increase": ["]"],
		"time_reset": "0"
	}
}


def deep_merge_dicts(base, updates):
	for key, value in updates.items():
		if key in base and isinstance(base[key], dict) and isinstance(value, dict):
			deep_merge_dicts(base[key], value)
		else:
			base[key] = value


def resolve_value(item):
	"""Resolve {"env": ..., "default": ...} into actual value"""
	if isinstance(item, dict) and "env" in item and "default" in item:
		return os.environ.get(item["env"], item["default"])
	return item


class ConfigManager:
	def __init__(self, config_path=None, use_default=False, config_dir=None):
		self.user_config_dir = config_dir or appdirs.user_config_dir(APP_NAME)
		self.use_default = use_default
		self.config_path = config_path

		self.config = self.load_config()
		self.setup_logging()
		self.setup_ui()
		self.setup_sync()

	@staticmethod
	def normalize_path(path: str) -> str:
		path = os.path.expanduser(path)
		if os.path.isabs(path):
			return os.path.normpath(path)
		return os.path.normpath(os.path.abspath(path))

	def load_config(self):
		merged_config = copy.deepcopy(DEFAULT_CONFIG)

		if not self.use_default:
			config_paths = [self.config_path] if self.config_path else [os.path.join(self.user_config_dir, f) for f in CONFIG_FILES]
			for path in config_paths:
				if path and os.path.exists(os.path.expanduser(path)):
					try:
						with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
							file_config = json.load(f)
						deep_merge_dicts(merged_config, file_config)
						break
					except (OSError, ValueError) as e:
						print(f"Error loading config from {path}: {e}", file=sys.stderr)

		merged_config["global"]["enable_debug"] = str(resolve_value(merged_config["global"]["enable_debug"])) == "1"
		return merged_config

	def setup_logging(self):
		self.LOG_DIR = self.normalize_path(self.config["global"]["logs_dir"])
		self.LOG_FILE = self.config["global"]["log_file"]
		self.LOG_LEVEL = self.config["global"]["log_level"]
		self.DEBUG_LOG = self.config["global"]["debug_log"]
		self.MAX_DEBUG_COUNT = self.config["global"]["max_debug_count"]
		self.MAX_LOG_COUNT = self.config["global"]["max_log_count"]
		self.ENABLE_DEBUG_LOGGING = self.config["global"]["enable_debug"]

	def setup_ui(self):
		ui = self.config["ui"]
		self.TICK = ui["tick_ms"] / 1000.0
		self.SCROLL_INTERVAL = ui["scroll_interval_ms"] / 1000.0
		self.SCROLL_HOLD = ui["scroll_hold_ticks"]
		self.SCROLL_SEPARATOR = ui["scroll_separator"]
		self.STATUS_MESSAGE_TIME = ui["status_message_sec"]
		self.MIN_SIZE = (ui["min_width"], ui["min_height"])
		self.COLOR_ACTIVE = resolve_value(ui["colors"]["active"])
		self.COLOR_INACTIVE = resolve_value(ui["colors"]["inactive"])
		self.COLOR_ERROR = resolve_value(ui["colors"]["error"])

	def setup_sync(self):
		sync = self.config["sync"]
		self.DRIFT_THRESHOLD = sync["drift_threshold_ms"] / 1000.0
		self.OFFSET_STEP = sync["offset_step_sec"]
		self.OFFSET_JUMP = sync["offset_jump_sec"]
