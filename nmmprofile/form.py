"""
'nmmprofile.form'
- height reference (leveling) of profiles:
    - constant references (min, max, average, ...)
    - linear references (two point line, least squares line)

Example
-------
>>> from nmmprofile import form
>>> leveled = form.ProfileForm.level(prf, form.ReferenceTo.Lsq)
"""

from enum import Enum

import numpy as np
from scipy import stats

from nmmprofile import profile


class ReferenceTo(Enum):
    """Height reference techniques, the values are the command line codes"""
    Nop = 0
    Minimum = 1
    Maximum = 2
    Average = 3
    Central = 4
    Bias = 5
    First = 6
    Last = 7
    Center = 8
    Line = 9
    Lsq = 10
    LinePositive = 11
    LsqPositive = 12


REFERENCE_LABELS = {
    ReferenceTo.Nop: 'nop',
    ReferenceTo.Minimum: 'min',
    ReferenceTo.Maximum: 'max',
    ReferenceTo.Average: 'average',
    ReferenceTo.Central: 'mid',
    ReferenceTo.Bias: 'bias',
    ReferenceTo.First: 'first',
    ReferenceTo.Last: 'last',
    ReferenceTo.Center: 'center',
    ReferenceTo.Line: 'linear',
    ReferenceTo.Lsq: 'LSQ',
    ReferenceTo.LinePositive: 'linear(positive)',
    ReferenceTo.LsqPositive: 'LSQ(positive)',
}


def referenceFromCode(code):
    """
    Maps the numerical option to the reference technique,
    codes outside 0-12 give ReferenceTo.Nop
    """
    try:
        return ReferenceTo(int(code))
    except ValueError:
        return ReferenceTo.Nop


def _twoPointLine(z, x):
    if z.size < 2 or x[-1] == 0:
        return np.full(z.size, z[0])
    return z[0] + (z[-1] - z[0]) * x / x[-1]


def _lsqLine(z, x):
    if z.size < 2 or x[-1] == 0:
        return np.full(z.size, np.mean(z))
    fit = stats.linregress(x, z)
    return fit.intercept + fit.slope * x


def levelData(z, deltaX, reference, bias=0.0):
    """
    Subtracts the reference from the height values

    Parameters
    ----------
    z: np.array
        The height values in um
    deltaX: float
        The sample spacing in um, the linear references are evaluated
        at index * deltaX
    reference: ReferenceTo
        The reference technique
    bias: float
        The value subtracted with ReferenceTo.Bias, in um

    Returns
    ----------
    leveled: np.array
        New array of the same length
    """
    z = np.asarray(z, dtype=float)
    n = z.size
    if n == 0 or reference is ReferenceTo.Nop:
        return z.copy()

    x = np.arange(n) * deltaX
    if reference is ReferenceTo.Minimum:
        return z - np.min(z)
    if reference is ReferenceTo.Maximum:
        return z - np.max(z)
    if reference is ReferenceTo.Average:
        return z - np.mean(z)
    if reference is ReferenceTo.Central:
        return z - (np.min(z) + np.max(z)) / 2
    if reference is ReferenceTo.Bias:
        return z - bias
    if reference is ReferenceTo.First:
        return z - z[0]
    if reference is ReferenceTo.Last:
        return z - z[-1]
    if reference is ReferenceTo.Center:
        # for even n this is the sample just after the midpoint
        return z - z[n // 2]
    if reference in (ReferenceTo.Line, ReferenceTo.LinePositive):
        leveled = z - _twoPointLine(z, x)
    else:
        leveled = z - _lsqLine(z, x)
    if reference in (ReferenceTo.LinePositive, ReferenceTo.LsqPositive):
        leveled = leveled - np.min(leveled)
    return leveled


class ProfileForm:
    """
    Leveling routines for profiles

    Notes
    -----
    All the methods in this class are implemented as a @staticmethod
    so this class is only used as a namespace to include all the routines
    """
    @staticmethod
    def level(obj: profile.Profile, reference, bias=0.0):
        """
        Levels the profile with the chosen height reference

        Parameters
        ----------
        obj: profile.Profile
            The profile to be leveled
        reference: ReferenceTo or int
            The reference technique or its numerical code
        bias: float
            The bias in um, used only with ReferenceTo.Bias

        Returns
        ----------
        leveled: profile.Profile
            A new profile with the leveled heights
        """
        if not isinstance(reference, ReferenceTo):
            reference = referenceFromCode(reference)
        return obj.derive(levelData(obj.Z, obj.deltaX, reference, bias), profile.LEVELED)
