"""Row-to-segment transformation for street sweeping data"""
from .sweeping_transformer import SweepingDataTransformer, load_csv

__all__ = ["SweepingDataTransformer", "load_csv"]
