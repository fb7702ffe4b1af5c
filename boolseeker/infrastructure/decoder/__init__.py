"""
APK decoding collaborator.
"""

from .apktool_decoder import ApktoolDecoder, is_apk_file

__all__ = [
    'ApktoolDecoder',
    'is_apk_file'
]
