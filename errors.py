"""Exceptions raised by the TLC spot detection pipeline."""


class TLCError(Exception):
    pass


class ImageLoadError(TLCError):
    pass


class ImageSaveError(TLCError):
    pass


class InvalidPlateError(TLCError):
    pass
