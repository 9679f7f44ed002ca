import logging

LOG_FORMAT = '%(asctime)s [%(name)s:%(funcName)s] %(levelname)-8s : %(message)s'


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # applies even when the root logger is already configured
    logging.getLogger("hyclock").setLevel(level)
