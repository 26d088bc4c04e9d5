"""
'nmmprofile.converter'
- extraction of the requested profiles from scan data
- processing chain: level -> tip convolution -> trim
- output of every requested format

A failure while writing one (profile, format) pair is recorded and the
remaining work goes on, the BatchReport lists what was written and what
failed. With stopOnFirstFailure the first failure is raised instead.
Missing channels and unusable scan direction data always stop the run.

Example
-------
>>> from nmmprofile import converter, measfile_io
>>> scan = measfile_io.openScan('scan.sdf')
>>> settings = converter.ConversionSettings.fromRcs(formats=[FileFormat.Csv])
>>> report = converter.convertScan(scan, settings, 'scan.sdf')
"""

from dataclasses import dataclass, field, replace
from pathlib import Path

from alive_progress import alive_bar

from nmmprofile import cutter, filter, form, formats, funct, profile, writer
from nmmprofile.exceptions import ConversionError, ScanDirectionError, UnknownChannelError
from nmmprofile.funct import options, rcs
from nmmprofile.measfile_io import ScanDirectionStatus, TopographyProcessType


@dataclass
class ConversionSettings:
    channel: str = None
    reference: form.ReferenceTo = form.ReferenceTo.Minimum
    bias: float = 0.0  # um
    tipRadius: float = 0.0  # um
    trimStart: float = None  # um
    trimLength: float = None  # um
    formats: list = field(default_factory=lambda: [formats.FileFormat.SigmaSurf])
    userComment: str = '*none*'
    profileIndex: int = 0
    processType: TopographyProcessType = TopographyProcessType.ForwardOnly
    stopOnFirstFailure: bool = False
    plot: bool = False

    @classmethod
    def fromRcs(cls, **kwargs):
        """Settings with the defaults taken from the global parameters"""
        kwargs.setdefault('channel', rcs.params['channel'])
        kwargs.setdefault('reference', form.referenceFromCode(rcs.params['reference']))
        kwargs.setdefault('formats', [formats.FORMAT_NAMES[rcs.params['defaultFormat']]])
        kwargs.setdefault('userComment', rcs.params['comment'])
        kwargs.setdefault('stopOnFirstFailure', rcs.params['stopOnFirstFailure'])
        return cls(**kwargs)


@dataclass
class Failure:
    profileIndex: int
    fileFormat: formats.FileFormat
    error: ConversionError


@dataclass
class BatchReport:
    written: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.failures

    @property
    def exitCode(self):
        return self.failures[0].error.exitCode if self.failures else 0


def resolveProcessType(scan, requested):
    """
    Checks the scan direction data and falls back to the forward scan
    when no backward scan is present

    Raises
    ------
    ScanDirectionError
        If the scan direction is unknown or the scan holds no data
    """
    status = scan.metadata.scanStatus
    if status is ScanDirectionStatus.Unknown:
        raise ScanDirectionError('Unknown scan type')
    if status is ScanDirectionStatus.NoData:
        raise ScanDirectionError('No scan data present', noData=True)
    if status is ScanDirectionStatus.ForwardOnly and requested is not TopographyProcessType.ForwardOnly:
        funct.warn('No backward scan data present, switching to forward only.')
        return TopographyProcessType.ForwardOnly
    return requested


def selectProfiles(profileIndex, numberOfProfiles):
    """
    Profile indexes (1 based) to be extracted, 0 means all profiles.
    Negative indexes count as 0, indexes above the number of profiles
    select the last one.
    """
    profileIndex = max(profileIndex, 0)
    profileIndex = min(profileIndex, numberOfProfiles)
    if profileIndex == 0:
        return list(range(1, numberOfProfiles + 1))
    return [profileIndex]


def outputBaseName(inputName, outputName, index, multiple):
    """
    Base name of the files of one profile, without extension (the writer
    appends the one of the format). Only the last extension of the
    given names is dropped: grating.2021.dat gives grating.2021_p1
    """
    if outputName is not None:
        base = Path(outputName)
        if not multiple:
            return base.with_suffix('')
        return base.with_name(f'{base.stem}_p{index}')
    base = Path(inputName)
    return base.with_name(f'{base.stem}_p{index}')


@options(chrono='tpPrc')
def processProfile(scan, index, settings: ConversionSettings):
    """
    Extracts one profile and applies the processing chain

    Parameters
    ----------
    scan: measfile_io.ScanData
        The scan data
    index: int
        Profile index, 1 based
    settings: ConversionSettings

    Returns
    ----------
    prf: profile.Profile
        The finalized profile
    """
    meta = scan.metadata
    channel = settings.channel if settings.channel is not None else scan.defaultChannel
    raw = scan.extractProfile(channel, index, settings.processType)

    prf = profile.Profile()
    prf.creationDate = meta.creationDate
    prf.sampleIdentification = meta.sampleIdentifier
    prf.fileName = Path(meta.fileName).name
    prf.userComment = settings.userComment
    prf.name = f'{prf.fileName} p{index}'
    prf.setRawData(raw, deltaX=meta.scanFieldDeltaX * 1e6)

    prf = form.ProfileForm.level(prf, settings.reference, bias=settings.bias)
    prf = filter.TipConvolution.dilation(prf, settings.tipRadius)
    if settings.trimStart is not None and settings.trimLength is not None:
        prf = cutter.ProfileCutter.cut(prf, settings.trimStart, settings.trimLength)
    return prf


def writeProfile(prf, baseName, settings, report, index, ctx=None):
    """Writes all requested formats of one profile, failures go to the report"""
    for fileFormat in settings.formats:
        funct.say(formats.encoderFor(fileFormat).describe())
        try:
            path = writer.writeToFile(prf, baseName, fileFormat, ctx, replaceSuffix=False)
        except ConversionError as exc:
            if settings.stopOnFirstFailure:
                raise
            funct.fail(f'!{exc}')
            report.failures.append(Failure(index, fileFormat, exc))
            continue
        funct.say(f'Writing {path} done', funct.Bcol.OKGREEN)
        report.written.append(path)


def convertScan(scan, settings: ConversionSettings, inputName, outputName=None, ctx=None):
    """
    Converts the requested profiles of a scan to all requested formats

    Parameters
    ----------
    scan: measfile_io.ScanData
        The scan data
    settings: ConversionSettings
    inputName: str or Path
        The input file, used for the default output names
    outputName: str or Path, optional
        Base name of the output files
    ctx: formats.FormatContext, optional

    Returns
    ----------
    report: BatchReport

    Raises
    ------
    ScanDirectionError, UnknownChannelError
        Always, before any file is written, the scan direction is checked first
    ConversionError
        The first failure, if settings.stopOnFirstFailure
    """
    processType = resolveProcessType(scan, settings.processType)
    channel = settings.channel if settings.channel is not None else scan.defaultChannel
    if not scan.columnPresent(channel):
        raise UnknownChannelError(f'Channel {channel} not in scan data')
    settings = replace(settings, channel=channel, processType=processType)
    if ctx is None:
        ctx = formats.FormatContext.fromRcs()

    indexes = selectProfiles(settings.profileIndex, scan.metadata.numberOfProfiles)
    report = BatchReport()
    with alive_bar(len(indexes), title='Profiles', disable=not rcs.params.get('verbose', True)) as bar:
        for index in indexes:
            try:
                prf = processProfile(scan, index, settings)
            except ConversionError as exc:
                if settings.stopOnFirstFailure:
                    raise
                funct.fail(f'!profile {index}: {exc}')
                report.failures.append(Failure(index, None, exc))
                bar()
                continue
            if settings.plot:
                rcs.setCurrentImage(f'p{index}')
                prf.pltCompare()
            baseName = outputBaseName(inputName, outputName, index, len(indexes) > 1)
            writeProfile(prf, baseName, settings, report, index, ctx)
            bar()
    return report
