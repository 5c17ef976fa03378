from .decoder import DecodedImage, decode, register_page_description_format
from .pipeline import encode, produce
from .planner import plan
from .thumbnailer import generate_thumbnail

__all__ = [
    "DecodedImage",
    "decode",
    "encode",
    "generate_thumbnail",
    "plan",
    "produce",
    "register_page_description_format",
]
