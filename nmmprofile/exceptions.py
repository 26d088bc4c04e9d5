"""
'nmmprofile.exceptions'
- error conditions of the conversion, each carries the exit code
  reported by the command line tool
"""


class ConversionError(Exception):
    exitCode = 10


class MissingInputError(ConversionError):
    exitCode = 1


class ScanDirectionError(ConversionError):
    """Scan direction data unknown (exit code 2) or absent (exit code 3)"""
    def __init__(self, message, noData=False):
        super().__init__(message)
        self.exitCode = 3 if noData else 2


class OutputWriteError(ConversionError):
    exitCode = 4

    def __init__(self, message, path=None, fileFormat=None):
        super().__init__(message)
        self.path = path
        self.fileFormat = fileFormat


class UnknownChannelError(ConversionError):
    exitCode = 5


class UnimplementedFormatError(ConversionError, NotImplementedError):
    exitCode = 6


class ScanFormatError(ConversionError):
    exitCode = 7
