from ._bundle import BUNDLE_FORMAT, load_multi, save_multi

__all__ = [
    "BUNDLE_FORMAT",
    load_multi.__name__,
    save_multi.__name__,
]
