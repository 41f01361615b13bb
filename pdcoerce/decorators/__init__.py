from .base import FunctionDecorator
from .extension import extension_func, ExtensionFunc
