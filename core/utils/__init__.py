from .utils import make_it_unique

__all__ = ["make_it_unique"]
