"""
'nmmprofile.formats'
Text encodings of a profile understood by third party profile software:
- PlainText: basic NPL text file
- SigmaSurf: format of the SigmaSurf freeware
- Prf: NPL PRF format
- PrGerman / PrEnglish: PTB PR format, German and English key words
- Smd: ISO 5436-2:2012
- Bcr: ISO 25178-71 / EUNA 15178 (sdf)
- Csv: x and z columns

All formats use CR LF line ends and a period as decimal separator.
An empty string is returned for a profile without samples.

Example
-------
>>> from nmmprofile import formats
>>> text = formats.dataToString(prf, formats.FileFormat.SigmaSurf)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

import numpy as np

import nmmprofile
from nmmprofile import funct, profile
from nmmprofile.exceptions import UnimplementedFormatError
from nmmprofile.funct import rcs

MONTHS = ('January', 'February', 'March', 'April', 'May', 'June', 'July',
          'August', 'September', 'October', 'November', 'December')

ETX = '\x03'  # end of record (Smd)
SUB = '\x1a'  # end of file (Smd)


class FileFormat(Enum):
    Unknown = 0
    SigmaSurf = 1
    Prf = 2
    PrGerman = 3
    PrEnglish = 4
    PlainText = 5
    Bcr = 6
    Smd = 7
    X3p = 8
    Csv = 9


# command line switch of each format
FORMAT_NAMES = {
    'sdf': FileFormat.Bcr,
    'txt': FileFormat.PlainText,
    'sig': FileFormat.SigmaSurf,
    'prf': FileFormat.Prf,
    'prEN': FileFormat.PrEnglish,
    'prDE': FileFormat.PrGerman,
    'smd': FileFormat.Smd,
    'csv': FileFormat.Csv,
    'x3p': FileFormat.X3p,
}


@dataclass
class FormatContext:
    """Everything the encoders need besides the profile"""
    newline: str = '\r\n'
    modDate: datetime = None
    appName: str = 'nmmprofile'
    appVersion: str = nmmprofile.__version__
    createdBy: str = 'Michael Matus, BEV'
    manufacturer: str = 'BEV / SIOS NMM'
    months: tuple = field(default=MONTHS)

    @classmethod
    def fromRcs(cls, **kwargs):
        """Context filled with the global parameters"""
        kwargs.setdefault('createdBy', rcs.params['createdBy'])
        kwargs.setdefault('manufacturer', rcs.params['manufacturer'])
        return cls(**kwargs)

    def modificationDate(self):
        return self.modDate if self.modDate is not None else datetime.now(timezone.utc)

    def month(self, date, short=False):
        name = self.months[date.month - 1]
        return name[:3] if short else name


def csExp(value, digits=6):
    """Scientific notation with three exponent digits: 1.000000e+003"""
    if not np.isfinite(value):
        return str(value)
    mantissa, exponent = f'{value:.{digits}e}'.split('e')
    return f'{mantissa}e{exponent[0]}{int(exponent[1:]):03d}'


def g17(value):
    """17 significant digits, enough to read back the same double"""
    return f'{value:.17g}'.replace('e', 'E')


def shortest(value):
    """Shortest text giving back the same double, no trailing '.0'"""
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text.replace('e', 'E')


class Encoder(ABC):
    fileFormat = FileFormat.Unknown
    extension = '.???'
    description = 'Requested output format unknown.'
    encoding = 'utf-8'

    def encode(self, obj: profile.Profile, ctx: FormatContext):
        """
        Text content of the file

        Parameters
        ----------
        obj: profile.Profile
            The finalized profile
        ctx: FormatContext
            Formatting options

        Returns
        ----------
        text: str
            The file content, empty if the profile has no samples
        """
        if obj.size == 0:
            return ''
        return self.body(obj, ctx)

    @abstractmethod
    def body(self, obj: profile.Profile, ctx: FormatContext):
        pass

    def describe(self):
        return f'{self.description} [*{self.extension}]'


class Unimplemented(Encoder):
    def encode(self, obj, ctx):
        raise UnimplementedFormatError(f'{self.fileFormat.name} output is not implemented')

    def body(self, obj, ctx):
        pass


class UnknownEncoder(Unimplemented):
    pass


class X3pEncoder(Unimplemented):
    # XML with schema ISO 25178-72, will not be implemented
    fileFormat = FileFormat.X3p
    extension = '.x3p'
    description = 'Output format to XML with schema as of ISO 25178-72.'


class PlainTextEncoder(Encoder):
    # http://resource.npl.co.uk/softgauges/Help.htm
    fileFormat = FileFormat.PlainText
    extension = '.txt'
    description = 'Output as basic text file as defined by NPL.'

    def body(self, obj, ctx):
        lines = [f'{obj.deltaX:.3f}']
        lines += [f'{z:.6f}' for z in obj.Z]
        return ctx.newline.join(lines) + ctx.newline


class SigmaSurfEncoder(Encoder):
    # http://www.digitalmetrology.com
    fileFormat = FileFormat.SigmaSurf
    extension = '.sig'
    description = 'Output format as used by SigmaSurf freeware.'

    def body(self, obj, ctx):
        d = obj.creationDate
        lines = [
            'SigmaSurf_Data 1.0',
            f'IDENTIFICATION: {obj.sampleIdentification}',
            f'DATE: {d.day:02d} {ctx.month(d, short=True)} {d.year:04d} - {d.hour:02d}:{d.minute:02d}',
            f'SPACING_UM: {obj.deltaX:.5f}',
            f'NUMBER_OF_POINTS: {obj.size}',
            'PROFILE_UM:',
        ]
        lines += [f'{z:.6f}' for z in obj.Z]  # resolution 1 pm
        return ctx.newline.join(lines) + ctx.newline


class PrfEncoder(Encoder):
    # not well documented, see http://resource.npl.co.uk/softgauges/Help.htm
    fileFormat = FileFormat.Prf
    extension = '.prf'
    description = 'Output PRF format as defined by NPL.'

    def body(self, obj, ctx):
        lines = [
            '1 2',
            'SG2004 0.000000e+000 PRF',
            f'CX M {csExp(float(obj.size))} MM 1.000000e+000 D',
            f'CZ M {csExp(float(obj.size))} MM 1.000000e-009 L',
            'EOR',
            'STYLUS_RADIUS 0.000000e+000 MM',
            f'SPACING CX {csExp(obj.deltaX * 1000.0)}',
            'MAP 1.000000e+000 CZ CZ 1.000000e+000 1.000000e+000',
            'MAP 2.000000e+000 CZ CX 1.000000e+000 0.000000e+000',
            f'COMMENT {obj.sampleIdentification}',
            'EOR',
        ]
        lines += [f'{z * 1e6:.0f}' for z in obj.Z]  # 1 pm steps
        lines += ['EOR', 'EOF']
        return ctx.newline.join(lines) + ctx.newline


class PrEncoder(Encoder):
    """
    PTB PR format, http://www.ptb.de/rptb
    The last z value is not followed by a line end.
    """
    extension = '.pr'
    metrics = ''

    def body(self, obj, ctx):
        xLen = obj.deltaX * (obj.size - 1)
        xResolution = 1000.0 / obj.deltaX if obj.deltaX > 0 else 0.0
        lines = [
            f'Profil {obj.fileName}',
            self.metrics.format(xLen=xLen, xResolution=xResolution, n=obj.size),
        ]
        lines += [f'{z:.6f}' for z in obj.Z]
        return ctx.newline.join(lines)


class PrGermanEncoder(PrEncoder):
    # the German key words with Umlaute are part of the old definition
    fileFormat = FileFormat.PrGerman
    description = 'Output PR format as defined by PTB with German key words.'
    metrics = 'X-Maß = {xLen:.8f} X-Auflösung {xResolution:.6f} Punkte/Zeile : {n}'


class PrEnglishEncoder(PrEncoder):
    fileFormat = FileFormat.PrEnglish
    description = 'Output PR format as defined by PTB with English key words.'
    metrics = 'X-len = {xLen:.8f} X-resolution {xResolution:.6f} points/scanline: {n}'


def smdChecksum(text):
    """Unsigned 16 bit sum of the ASCII bytes, non ASCII characters count as '?'"""
    return sum(text.encode('ascii', errors='replace')) % 65536


class SmdEncoder(Encoder):
    # ISO 5436-2:2012, uses some non printable characters
    fileFormat = FileFormat.Smd
    extension = '.smd'
    description = 'Output SMD format as of ISO 5436-2.'

    def body(self, obj, ctx):
        nl = ctx.newline
        endOfRecord = ETX + nl
        d = obj.creationDate
        parts = [
            f'ISO 5436-2:2012\0{obj.fileName}\0{nl}',
            f'PRF\0 1 ISO5436\0{nl}',
            f'CX\0 I\0 {obj.size} mm\0 1.0e0 D\0 {csExp(obj.deltaX / 1000, 5)} {nl}',
            f'CZ\0 A\0 {obj.size} um\0 1.0e0 D\0{nl}',
            endOfRecord,
            f'DATE: {d.day:02d}-{ctx.month(d)}-{d.year:04d}\0{nl}',
            f'TIME: {d.hour:02d}:{d.minute:02d}\0{nl}',
            f'CREATED_BY {ctx.createdBy}\0{nl}',
            f'COMMENT /* {obj.userComment} */\0{nl}',
            endOfRecord,
        ]
        parts += [f'{z:.5f}{nl}' for z in obj.Z]
        parts.append(endOfRecord)
        text = ''.join(parts)
        return f'{text}{smdChecksum(text)}{nl}{endOfRecord}{SUB}'


class BcrEncoder(Encoder):
    # ISO 25178-7, ISO 25178-71 and EUNA 15178
    fileFormat = FileFormat.Bcr
    extension = '.sdf'
    description = 'Output SDF format as of ISO 25178-71 and EUNA 15178.'

    @staticmethod
    def stamp(d):
        return f'{d.day:02d}{d.month:02d}{d.year:04d}{d.hour:02d}{d.minute:02d}'

    def body(self, obj, ctx):
        lines = [
            'aBCR - 1.0',
            f'ManufacID   = {ctx.manufacturer}',
            f'CreateDate  = {self.stamp(obj.creationDate)}',
            f'ModDate     = {self.stamp(ctx.modificationDate())}',
            f'NumPoints   = {obj.size}',
            'NumProfiles = 1',
            f'Xscale      = {g17(obj.deltaX * 1e-6)}',
            'Yscale      = 0',
            'Zscale      = 1.0e-6',
            'Zresolution = -1',  # clause 5.2.8, do not modify!
            'Compression = 0',  # clause 5.2.9, do not modify!
            'DataType    = 7',
            'CheckType   = 0',  # clause 5.2.11, do not modify!
            '*',
        ]
        lines += [g17(z) for z in obj.Z]
        lines += [
            '*',
            f'ConvertedBy          = {ctx.appName} version {ctx.appVersion}',
            f'SampleIdentification = {obj.sampleIdentification}',
            f'FileName             = {obj.fileName}',
            f'UserComment          = {obj.userComment}',
            f'TrimmedStart         = {shortest(obj.start)} µm',
            f'TrimmedLength        = {shortest(obj.length)} µm',
            '*',
        ]
        return ctx.newline.join(lines) + ctx.newline


class CsvEncoder(Encoder):
    fileFormat = FileFormat.Csv
    extension = '.csv'
    description = 'Output as basic CSV file.'

    def body(self, obj, ctx):
        x = funct.accumulatedPositions(obj.size, obj.deltaX)
        lines = ['x in µm,z in µm']
        lines += [f'{g17(xi)},{g17(z)}' for xi, z in zip(x, obj.Z)]
        return ctx.newline.join(lines) + ctx.newline


ENCODERS = {enc.fileFormat: enc for enc in (
    UnknownEncoder(),
    SigmaSurfEncoder(),
    PrfEncoder(),
    PrGermanEncoder(),
    PrEnglishEncoder(),
    PlainTextEncoder(),
    BcrEncoder(),
    SmdEncoder(),
    X3pEncoder(),
    CsvEncoder(),
)}


def encoderFor(fileFormat):
    return ENCODERS.get(fileFormat, ENCODERS[FileFormat.Unknown])


def extensionFor(fileFormat):
    """File name extension of the format, '.???' if unknown"""
    return encoderFor(fileFormat).extension


def dataToString(obj: profile.Profile, fileFormat, ctx=None):
    """
    Renders the profile in the requested format

    Parameters
    ----------
    obj: profile.Profile
        The finalized profile
    fileFormat: FileFormat
        The output format
    ctx: FormatContext, optional
        Formatting options, by default built from the global parameters

    Raises
    ------
    UnimplementedFormatError
        For FileFormat.X3p and FileFormat.Unknown
    """
    if ctx is None:
        ctx = FormatContext.fromRcs()
    return encoderFor(fileFormat).encode(obj, ctx)
