from .dataset import load_dataset, save_dataset

__all__ = ["load_dataset", "save_dataset"]
