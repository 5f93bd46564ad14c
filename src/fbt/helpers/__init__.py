"""Helper functions for using fbt from scripts and the command line."""
from .cfg_utils import engine_to_dict, make_function
