from .clock import define_natives

__all__ = ['define_natives']
