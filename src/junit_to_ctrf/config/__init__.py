from .loader import load_options, merge_options
from .models import ConvertOptions, parse_env_props

__all__ = ["ConvertOptions", "load_options", "merge_options", "parse_env_props"]
