"""
'nmmprofile.cutter'
- Cutting operations for profiles

Notes
-----
These utilities are implemented as classes in order to allow the creation
of templates to apply the same processing to multiple profiles.
"""

from abc import ABC, abstractmethod

import numpy as np

from nmmprofile import funct, profile


class Cutter(ABC):
    """
    Class that provides methods for profile cutting
    static methods are used to work directly on profiles, cutter objects
    can be instantiated to apply the same cut to multiple profiles
    """
    def __init__(self):
        self.extents = None

    @abstractmethod
    def applyCut(self, obj):
        """
        Applies the cut to the object passed using the extents
        defined previously
        """
        if self.extents is None:
            raise ValueError('Cut extents are not defined')


class ProfileCutter(Cutter):
    def __init__(self, start=None, length=None):
        super().__init__()
        if start is not None and length is not None:
            self.extents = (start, length)

    def applyCut(self, obj: profile.Profile):
        """
        Applies the cut to the object passed using the extents
        defined at construction

        Parameters
        ----------
        obj: profile.Profile
            The profile object on wich the cut is performed

        Returns
        ----------
        cut: profile.Profile
            The trimmed profile
        """
        super().applyCut(obj)
        start, length = self.extents
        return ProfileCutter.cut(obj, start, length)

    @staticmethod
    def window(z, deltaX, start, length):
        """
        Keeps the samples whose position lies in [start, start + length]

        Parameters
        ----------
        z: np.array
            The height values
        deltaX: float
            The sample spacing in um
        start: float
            Start of the window in um
        length: float
            Length of the window in um

        Returns
        ----------
        cut: np.array
            The samples in the window, in their original order

        Notes
        -----
        The positions are a running sum of deltaX (see funct.accumulatedPositions),
        not index * deltaX.
        """
        z = np.asarray(z, dtype=float)
        x = funct.accumulatedPositions(z.size, deltaX)
        keep = (x >= start) & (x <= start + length)
        return z[keep]

    @staticmethod
    def cut(obj: profile.Profile, start, length):
        """
        Trims the profile to a window, can be applied only once to a profile

        Parameters
        ----------
        obj: profile.Profile
            The profile object on wich the cut is applied
        start: float
            Start of the window in um
        length: float
            Length of the window in um

        Returns
        ----------
        cut: profile.Profile
            A new profile recording start and length of the window
        """
        return obj.derive(ProfileCutter.window(obj.Z, obj.deltaX, start, length),
                          profile.TRIMMED, start=float(start), length=float(length))
