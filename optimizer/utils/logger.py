"""
Logging for the optimizer package.

Every module gets an OptimizerLogger through get_logger(). Loggers share one
global configuration (level, console/file output, log file) and are rebuilt
whenever it changes, so a run script can redirect all package logging to a
per-run file after the modules have been imported.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class OptimizerLogger:
    """
    Named logger with batch-run helpers.

    Console output goes to stdout; file output rotates at max_file_size.
    Records do not propagate to the root logger.
    """

    _global_config: Dict[str, Any] = {
        'level': 'INFO',
        'log_file': None,
        'console_output': True,
        'file_output': True,
        'max_file_size': 10 * 1024 * 1024,
        'backup_count': 5
    }

    _loggers: Dict[str, 'OptimizerLogger'] = {}

    def __init__(self, name: str, level: str = None, log_file: Optional[str] = None):
        """
        Args:
            name: Logger name, usually the module's __name__
            level: Level for this logger only; falls back to the global level
            log_file: File for this logger only; falls back to the global file
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self._level = level
        self._log_file = log_file
        self._configure_handlers()

        OptimizerLogger._loggers[name] = self

    def _build_handlers(self, log_file: Optional[str]) -> List[logging.Handler]:
        config = self._global_config
        handlers: List[logging.Handler] = []

        if config['console_output']:
            handlers.append(logging.StreamHandler(sys.stdout))

        if config['file_output'] and log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=config['max_file_size'],
                backupCount=config['backup_count']
            ))

        return handlers

    def _configure_handlers(self):
        level = self._level or self._global_config['level']
        log_file = self._log_file or self._global_config['log_file']

        self.logger.setLevel(getattr(logging, level.upper()))

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        for handler in self._build_handlers(log_file):
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        self.logger.propagate = False

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def critical(self, message: str):
        self.logger.critical(message)

    def log_workflow_step(self, step_name: str, step_number: int, total_steps: int,
                          description: str = ""):
        """Log the start of a numbered pipeline step"""
        message = f"Step {step_number}/{total_steps}: {step_name}"
        if description:
            message += f" - {description}"
        self.info(message)

    def log_step_completion(self, step_name: str, duration: float,
                            details: Dict[str, Any] = None):
        """Log a finished step with its duration and optional counters"""
        message = f"✅ {step_name} completed in {duration:.2f}s"
        if details:
            message += " - " + ", ".join(f"{key}: {value}" for key, value in details.items())
        self.info(message)

    def log_batch_progress(self, done: int, total: int, operation: str):
        """Log how far a per-item batch has got"""
        percentage = (done / total) * 100 if total > 0 else 100.0
        self.info(f"📊 {operation}: {done:,}/{total:,} items ({percentage:.1f}%)")

    def log_item_fault(self, item_id: str, error: Exception, operation: str = "calculation"):
        """Log an item whose computation failed and was replaced by a placeholder"""
        self.error(f"❌ {operation} failed for item {item_id!r}, using zero result: {error}")

    def log_validation_result(self, source: str, is_valid: bool, issue_count: int = 0):
        if is_valid:
            self.info(f"✅ Validation passed for {source}")
        else:
            self.warning(f"⚠️ Validation failed for {source}: {issue_count} issues")

    def log_error_with_context(self, error: Exception, context: str = ""):
        if context:
            self.error(f"❌ Error in {context}: {error}")
        else:
            self.error(f"❌ Error: {error}")

    @classmethod
    def configure_global(cls, **kwargs):
        """Update the shared settings and rebuild every registered logger"""
        cls._global_config.update(kwargs)

        for logger in cls._loggers.values():
            logger._configure_handlers()

    @classmethod
    def set_level(cls, level: str):
        cls.configure_global(level=level)


def get_logger(name: str = None, level: str = None,
               log_file: Optional[str] = None) -> OptimizerLogger:
    """Return the registered logger for name, creating it on first use."""
    name = name or "optimizer"

    existing = OptimizerLogger._loggers.get(name)
    if existing is not None:
        return existing

    return OptimizerLogger(name, level, log_file)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  console_output: bool = True, file_output: bool = True):
    """Set the global logging options for all optimizer loggers."""
    OptimizerLogger.configure_global(
        level=level,
        log_file=log_file,
        console_output=console_output,
        file_output=file_output
    )


def configure_workflow_logging(workflow_name: str, log_level: str = "INFO",
                               log_dir: str = "output/logs") -> OptimizerLogger:
    """
    Point all optimizer logging at a timestamped file for one run.

    Args:
        workflow_name: Used in the log file name and the opening message
        log_level: Level for every logger
        log_dir: Directory the log file is created in

    Returns:
        The 'workflow' logger
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = f"{log_dir}/{workflow_name}_{timestamp}.log"

    setup_logging(level=log_level, log_file=log_file)

    logger = get_logger("workflow")
    logger.info(f"🚀 {workflow_name} started")
    logger.info(f"📝 Log file: {log_file}")
    return logger
