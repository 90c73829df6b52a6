import logging


def get_logger(name: str = ""):
    """
    Returns a "crumb" logger, or one of its children if a name is given.
    """
    if name:
        return logging.getLogger(f"crumb.{name}")
    return logging.getLogger("crumb")
