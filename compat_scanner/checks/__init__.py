from .doctype import check_doctype
from .compression import check_compression
from .conditional_comments import check_conditional_comments
from .accessibility import check_alt_images, check_aria_tags
from .prefetch import check_prefetch
from .compat_list import make_compat_list_check
from .plugin_free import make_plugin_free_check
from .same_markup import check_same_markup
from .w3c_validator import check_w3c_validator
from .image_compression import check_image_compression
from .responsive import MediaQueriesRule, check_responsive
from .touch import TouchPropertiesRule, check_touch
from .css_prefixes import VendorPrefixRule, check_css_prefixes
from .js_libs import check_js_libs
from .browser_detection import check_browser_detection
from .inputs import check_input_types
from .tiles import check_ie10_favicon, check_ie11_tiles

__all__ = [
    "check_doctype",
    "check_compression",
    "check_conditional_comments",
    "check_alt_images",
    "check_aria_tags",
    "check_prefetch",
    "make_compat_list_check",
    "make_plugin_free_check",
    "check_same_markup",
    "check_w3c_validator",
    "check_image_compression",
    "MediaQueriesRule",
    "check_responsive",
    "TouchPropertiesRule",
    "check_touch",
    "VendorPrefixRule",
    "check_css_prefixes",
    "check_js_libs",
    "check_browser_detection",
    "check_input_types",
    "check_ie10_favicon",
    "check_ie11_tiles",
]
