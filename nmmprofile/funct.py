"""
'nmmprofile.funct'
- utility functions
- console output helpers
- decorators for automation and code reusage
- global parameters (Rcs)
"""

import time
import os
import json

import matplotlib.pyplot as plt
import numpy as np


class Bcol:
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'


def persFig(figures, xlab, ylab, gridcol='k'):
    """
    Personalize an axis object or multiple
    Parameters
    ----------
    figures: list
        The list of ax objects to be customized
    gridcol: str
        The color of the grid
    xlab: str
    ylab: str -> labels
    """
    for figure in figures:
        figure.set_xlabel(xlab)
        figure.set_ylabel(ylab)
        figure.grid(color=gridcol)


def say(msg, col=None):
    """
    Prints a console message unless the quiet mode is active

    Parameters
    ----------
    msg: str
        The message
    col: str, optional
        One of the Bcol codes
    """
    if not rcs.params.get('verbose', True):
        return
    if col is None:
        print(msg)
    else:
        print(col + msg + Bcol.ENDC)


def warn(msg):
    say(msg, Bcol.WARNING)


def fail(msg):
    """Errors are printed also in quiet mode"""
    print(Bcol.FAIL + msg + Bcol.ENDC)


def accumulatedPositions(n, spacing):
    """
    Positions of n samples obtained by adding the spacing once per sample,
    starting from 0.

    Parameters
    ----------
    n: int
        Number of samples
    spacing: float
        The step added for every sample

    Returns
    -------
    x: np.array
        x[0] = 0, x[i] = x[i-1] + spacing

    Notes
    -----
    The running sum drifts away from i * spacing on long profiles,
    existing output files were produced with the running sum.
    """
    x = np.zeros(n)
    if n > 1:
        x[1:] = np.cumsum(np.full(n - 1, float(spacing)))
    return x


def options(save=None, bplt=None, chrono=None):
    """
    Decorator that implements global configurations

    Parameters
    ----------
    save: str
        Rcs key, if the parameter is not none the figures are saved
        with the parameter used as path prefix
    bplt: str
        Rcs key, if the parameter is True shows the images
    chrono: str
        Rcs key, if the parameter is True times the duration of the decorated function

    Notes
    ----------
    The keys are looked up in rcs when the decorated function is called,
    so a parameter file loaded later is honoured.
    Use this decorator only on methods that do not call plt.show
    """
    def outer(func):
        def inner(*args, **kwargs):
            init = time.time()
            nfig = len(plt.get_fignums())
            # exec the function
            ret = func(*args, **kwargs)

            if save is not None or bplt is not None:
                figs = [plt.figure(n) for n in plt.get_fignums()[nfig:]]
                savePath = rcs.params.get(save) if save is not None else None
                if savePath is not None:  # save the figures
                    if len(figs) > 0:
                        say(f'Saving images from function {func.__name__}', Bcol.OKCYAN)
                        for i, fig in enumerate(figs):
                            fig.savefig(f'{savePath}{func.__name__}_{rcs.currentImage}_{str(i)}.png', format='png')
                    else:
                        warn(f'Function {func.__name__} has no active figures')

                if bplt is not None and rcs.params.get(bplt, False):  # plot the figure
                    if len(figs) > 0:
                        say(f'Plotting image from function {func.__name__}', Bcol.OKCYAN)
                        plt.show()
                    else:
                        warn(f'Function {func.__name__} has no active figures')
                else:
                    for fig in figs:
                        plt.close(fig)

            if chrono is not None and rcs.params.get(chrono, False):  # time the function
                say(f"Function {func.__name__} took: {(time.time() - init):.2f} seconds", Bcol.OKCYAN)
            return ret
        inner.__name__ = func.__name__
        inner.__doc__ = func.__doc__
        return inner
    return outer


class Rc:
    """
    Class used to define the global parameters

    Parameters convention for the plot / timing options: each key has:
    - 1 letter indentifying the option
        - s: save the image
        - b: bplt
        - t: chrono
    - 1 letter identifying the type
        - p: profile
    - 3 chars identifying the decorated function

    The other keys hold the conversion defaults (channel, reference, ...)
    """
    params: dict
    currentImage: str = 'Image'

    def __init__(self):
        rcfile = os.path.join(os.path.dirname(__file__), 'Rcs.json')
        with open(rcfile, 'r') as fin:
            self.params = json.load(fin)
        self._defaults = dict(self.params)

    def load(self, js_fin):
        """
        Loads a user defined rc parameters file,
        keys missing in the file keep their current value

        Parameters
        ----------
        js_fin: str
            The json file name
        """
        with open(js_fin, 'r') as fin:
            self.params.update(json.load(fin))

    def store(self, js_fout):
        """
        Saves the current parameters to a file

        Parameters
        ----------
        js_fout: str
            The json file name
        """
        with open(js_fout, 'w') as fout:
            json.dump(self.params, fout, indent=2)

    def reset(self):
        """Restores the packaged parameters"""
        self.params = dict(self._defaults)
        self.currentImage = 'Image'

    def setCurrentImage(self, name):
        self.currentImage = name


rcs = Rc()  # define global Rcs
