"""Levelled file logging; the terminal belongs to curses so nothing goes to stdout"""

import os
import sys
import time
from datetime import datetime

LOG_LEVELS = {
	"FATAL": 5,
	"ERROR": 4,
	"WARN": 3,
	"INFO": 2,
	"DEBUG": 1,
	"TRACE": 0
}


class Logger:
	"""Handle application logging"""

	def __init__(self, config_manager=None):
		self.LOG_DIR = None
		if config_manager is not None:
			self.configure(config_manager)

	def configure(self, config_manager):
		self.LOG_DIR = config_manager.LOG_DIR
		self.LOG_FILE = config_manager.LOG_FILE
		self.LOG_LEVEL = config_manager.LOG_LEVEL
		self.DEBUG_LOG = config_manager.DEBUG_LOG
		self.MAX_DEBUG_COUNT = config_manager.MAX_DEBUG_COUNT
		self.MAX_LOG_COUNT = config_manager.MAX_LOG_COUNT
		self.ENABLE_DEBUG_LOGGING = config_manager.ENABLE_DEBUG_LOGGING

	@property
	def configured(self):
		return self.LOG_DIR is not None

	@staticmethod
	def _trim(path, keep):
		"""Keep only the last `keep` lines of a log file"""
		if not os.path.exists(path):
			return
		try:
			with open(path, "r+", encoding="utf-8") as f:
				lines = f.readlines()
				if len(lines) > keep:
					f.seek(0)
					f.truncate()
					f.writelines(lines[-keep:])
		except OSError as e:
			sys.stderr.write(f"Log cleanup failed: {e}\n")

	def log_message(self, level: str, message: str):
		"""Unified logging function with level-based filtering and rotation"""
		if not self.configured:
			return

		main_log = os.path.join(self.LOG_DIR, self.LOG_FILE)
		debug_log = os.path.join(self.LOG_DIR, self.DEBUG_LOG)
		configured_level = LOG_LEVELS.get(self.LOG_LEVEL.upper(), 2)
		message_level = LOG_LEVELS.get(level.upper(), 2)

		try:
			os.makedirs(self.LOG_DIR, exist_ok=True)
			timestamp = f"{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}.{int(time.time() * 1000000) % 1000000:06d}"
			entry = f"{timestamp} | {level.upper()} | {message}\n"

			if self.ENABLE_DEBUG_LOGGING and message_level <= LOG_LEVELS["DEBUG"]:
				with open(debug_log, "a", encoding="utf-8") as f:
					f.write(entry)
				self._trim(debug_log, self.MAX_DEBUG_COUNT)

			if message_level >= configured_level:
				with open(main_log, "a", encoding="utf-8") as f:
					f.write(entry)
				self._trim(main_log, self.MAX_LOG_COUNT)

		except OSError as e:
			sys.stderr.write(f"Logging failed: {e}\n")

	def log_fatal(self, message: str):
		self.log_message("FATAL", message)

	def log_error(self, message: str):
		self.log_message("ERROR", message)

	def log_warn(self, message: str):
		self.log_message("WARN", message)

	def log_info(self, message: str):
		self.log_message("INFO", message)

	def log_debug(self, message: str):
		self.log_message("DEBUG", message)

	def log_trace(self, message: str):
		self.log_message("TRACE", message)


# Inert until app.main() calls LOGGER.configure()
LOGGER = Logger()
