import logging

# scalars are plain python floats (IEEE double)
dtype = float

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

# centered finite difference settings used for gradient checking
GRADCHECK_EPS = 1e-6
GRADCHECK_TOL = 1e-3


def configure_logging(filename=None, level=logging.DEBUG):
    """Routes the package loggers through ``logging.basicConfig``.

    The library never calls this itself; applications and scripts opt in.
    """
    logging.basicConfig(
        filename=filename,
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logging.getLogger(__package__).setLevel(level)
