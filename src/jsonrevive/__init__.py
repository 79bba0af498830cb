"""
Revive JSON documents as instances of python classes, guided by schemas
"""
from .exceptions import *
from .reviver import *
from .schema import *
