"""
'nmmprofile.writer'
- writes a profile to a file in one of the formats of nmmprofile.formats

The file name extension is replaced by the one of the format.
The content is written to a temporary file in the target folder which
then replaces the target, a failing write leaves no partial file behind.
"""

import copy
import os
import tempfile
from pathlib import Path

from nmmprofile import formats, profile
from nmmprofile.exceptions import OutputWriteError


def outputPath(fileName, fileFormat, replaceSuffix=True):
    """
    Path with the extension of the format

    With replaceSuffix the extension of fileName is replaced (appended if it
    has none), otherwise fileName is taken as a base name without extension
    and the extension is always appended, dots in the name are kept.
    """
    path = Path(fileName)
    extension = formats.extensionFor(fileFormat)
    if replaceSuffix:
        return path.with_suffix(extension)
    return path.with_name(path.name + extension)


def writeToFile(obj: profile.Profile, fileName, fileFormat, ctx=None, replaceSuffix=True):
    """
    Writes the profile to a file

    Parameters
    ----------
    obj: profile.Profile
        The finalized profile
    fileName: str or Path
        Target file
    fileFormat: formats.FileFormat
        The output format
    ctx: formats.FormatContext, optional
        Formatting options
    replaceSuffix: bool
        See outputPath, False for base names without extension

    Returns
    ----------
    path: Path
        The file written

    Raises
    ------
    OutputWriteError
        If the format produced no data or the file could not be written
    UnimplementedFormatError
        If the format is not implemented
    """
    path = outputPath(fileName, fileFormat, replaceSuffix)
    # the header of some formats carries the name of the file itself
    stamped = copy.copy(obj)
    stamped.fileName = path.name
    text = formats.dataToString(stamped, fileFormat, ctx)
    if not text.strip():
        raise OutputWriteError(f'no data to write to {path}', path=path, fileFormat=fileFormat)

    encoding = formats.encoderFor(fileFormat).encoding
    tmpName = None
    try:
        fd, tmpName = tempfile.mkstemp(prefix=f'.{path.name}.', dir=path.parent)
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as fout:
            fout.write(text)
        os.chmod(tmpName, 0o644)
        os.replace(tmpName, path)
    except OSError as exc:
        if tmpName is not None and os.path.exists(tmpName):
            os.remove(tmpName)
        raise OutputWriteError(f'could not write file {path}: {exc}', path=path, fileFormat=fileFormat) from exc
    return path
