from .jsonl_logger import JSONLFormatter, JSONLHandler, configure_logging, setup_jsonl_logger

__all__ = ["JSONLFormatter", "JSONLHandler", "configure_logging", "setup_jsonl_logger"]
