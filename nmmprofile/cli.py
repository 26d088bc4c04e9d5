"""
'nmmprofile.cli'
Command line tool converting NMM scan files to files readable by standard
surface profiling software.

    nmm2profile filename1 [filename2] [options]

For input files containing multiple line profiles (raster files) a single
profile or all profiles are extracted.
"""

import os

import click

import nmmprofile
from nmmprofile import converter, form, formats, funct, measfile_io
from nmmprofile.exceptions import ConversionError, MissingInputError
from nmmprofile.funct import rcs
from nmmprofile.measfile_io import TopographyProcessType

REFERENCE_HELP = '\b\nSupported values for --reference (-r):\n' + '\n'.join(
    f'{ref.value:>5}: {label}' for ref, label in form.REFERENCE_LABELS.items())


class CliError(click.ClickException):
    """Click exception carrying the exit code of the conversion error"""

    def __init__(self, message, exit_code=1):
        super().__init__(message)
        self.exit_code = int(exit_code)

    def show(self, file=None):
        funct.fail(f'!{self.format_message()}')


def _formatSwitch(name, fileFormat):
    return click.option(f'--{name}', f'fmt_{name}', is_flag=True,
                        help=f'Convert to {fileFormat.name} [*{formats.extensionFor(fileFormat)}].')


def _formatSwitches(func):
    for name, fileFormat in reversed(list(formats.FORMAT_NAMES.items())):
        func = _formatSwitch(name, fileFormat)(func)
    return func


def _processType(back, both, diff):
    processType = TopographyProcessType.ForwardOnly
    if back:
        processType = TopographyProcessType.BackwardOnly
    if both:
        processType = TopographyProcessType.Average
    if diff:
        processType = TopographyProcessType.Difference
    return processType


@click.command(name='nmm2profile', epilog=REFERENCE_HELP)
@click.argument('filenames', nargs=-1, type=click.Path())
@click.option('-c', '--channel', default=None, help='Channel to export.')
@click.option('--comment', default=None, help='User supplied comment string.')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode. No screen output (except for errors).')
@click.option('-r', '--reference', type=int, default=None, help='Height reference technique.')
@click.option('-b', '--bias', type=float, default=0.0, show_default=True, help='Bias value [um] to be subtracted.')
@click.option('--back', is_flag=True, help='Use backtrace profile (when present).')
@click.option('--both', is_flag=True, help='Mean of forward and backtrace profile (when present).')
@click.option('--diff', is_flag=True, help='Difference (forward-backtrace) profile (when present).')
@click.option('-p', '--profile', 'profileIndex', type=int, default=0, show_default=True,
              help='Extract single profile. (0 for all)')
@click.option('--tip', 'tipRadius', type=float, default=0.0, show_default=True,
              help='Radius [um] of the spherical tip to be convolved with the profile.')
@click.option('--xstart', type=float, default=None, help='Start [um] of the trimmed profile.')
@click.option('--xlength', type=float, default=None, help='Length [um] of the trimmed profile.')
@click.option('--fail-fast', is_flag=True, help='Stop at the first file that cannot be written.')
@click.option('--rc', 'rcFile', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Parameter file (json) replacing the packaged defaults.')
@click.option('--plot', is_flag=True, help='Plot raw and processed profiles.')
@click.option('--plot-dir', 'plotDir', type=click.Path(file_okay=False), default=None,
              help='Save the plots with this path prefix.')
@_formatSwitches
@click.version_option(nmmprofile.__version__, prog_name='nmm2profile')
@click.pass_context
def cli(ctx, filenames, channel, comment, quiet, reference, bias, back, both, diff, profileIndex,
        tipRadius, xstart, xlength, fail_fast, rcFile, plot, plotDir, **switches):
    """Program to convert scanning files by SIOS NMM-1 to files readable by standard
    surface profiling software. Eight different output file formats can be chosen.
    A rudimentary data processing is possible via the -r option."""
    if rcFile is not None:
        rcs.load(rcFile)
    if quiet:
        rcs.params['verbose'] = False
    if plot:
        rcs.params['bpCom'] = True
    if plotDir is not None:
        os.makedirs(plotDir, exist_ok=True)
        rcs.params['spCom'] = os.path.join(plotDir, '')

    funct.say(f'nmm2profile version {nmmprofile.__version__}', funct.Bcol.HEADER)
    if len(filenames) == 0:
        raise CliError('Missing input file', exit_code=MissingInputError.exitCode)
    if len(filenames) > 2:
        raise CliError('At most two file names (input and output) are accepted')

    requested = [fileFormat for name, fileFormat in formats.FORMAT_NAMES.items() if switches[f'fmt_{name}']]
    settings = converter.ConversionSettings.fromRcs(
        reference=form.referenceFromCode(reference if reference is not None else rcs.params['reference']),
        bias=bias,
        tipRadius=tipRadius,
        trimStart=xstart,
        trimLength=xlength,
        profileIndex=profileIndex,
        processType=_processType(back, both, diff),
        plot=plot or plotDir is not None,
    )
    if requested:
        settings.formats = requested
    if channel is not None:
        settings.channel = channel
    if comment is not None:
        settings.userComment = comment
    if fail_fast:
        settings.stopOnFirstFailure = True

    try:
        funct.say('Reading and evaluating files', funct.Bcol.OKCYAN)
        scan = measfile_io.openScan(filenames[0])
        report = converter.convertScan(scan, settings, filenames[0],
                                       filenames[1] if len(filenames) == 2 else None)
    except ConversionError as exc:
        raise CliError(str(exc), exit_code=exc.exitCode) from exc

    if not report.ok:
        funct.fail(f'!{len(report.failures)} file(s) could not be written')
        ctx.exit(report.exitCode)
    funct.say(f'{len(report.written)} file(s) written', funct.Bcol.OKGREEN)


def main():
    cli(prog_name='nmm2profile')


if __name__ == '__main__':
    main()
