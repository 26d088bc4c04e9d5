"""
'nmmprofile.profile'
- data structure for profile objects
- plots of the profile

A Profile is built once per extracted scan line and then passed through
the processing chain level -> tip convolution -> trim. Every step returns
a new Profile, the object it was called on is left untouched.

Example
-------
>>> from nmmprofile import profile, form
>>> prf = profile.Profile()
>>> prf.setRawData(z_in_meter, deltaX=0.5)
>>> lev = form.ProfileForm.level(prf, form.ReferenceTo.Lsq)
>>> lev.pltCompare()
"""

import copy
from datetime import datetime, timezone

import numpy as np
import matplotlib.pyplot as plt

from nmmprofile import funct
from nmmprofile.funct import options

# processing stages, a step may only follow a lower stage
RAW, LEVELED, CONVOLVED, TRIMMED = 0, 1, 2, 3
STAGES = {RAW: 'raw data', LEVELED: 'leveling', CONVOLVED: 'tip convolution', TRIMMED: 'trimming'}

NO_TIP_CONVOLUTION = 'no tip convolution performed'


class Profile:
    """
    Class for handling profile data
    Heights (Z) and the spacing (deltaX) are in um
    Provides simple visualization plots
    """
    def __init__(self):
        """Instantiate an empty Profile object"""
        self.Z = np.array([], dtype=float)
        self.Z0 = self.Z
        self.deltaX = 0.0

        self.creationDate = datetime.now(timezone.utc)
        self.sampleIdentification = '<unknown sample>'
        self.fileName = '<unknown file name>'
        self.userComment = '<unknown user comment>'

        self.start = 0.0
        self.length = 0.0
        self.tipConvolutionMessage = NO_TIP_CONVOLUTION

        self.stage = RAW
        self.name = 'Profile'

    def setRawData(self, zRaw, deltaX=None):
        """
        Sets the height values of the profile

        Parameters
        ----------
        zRaw: []
            The height values in m, they are stored in um
        deltaX: float, optional
            The spacing of the samples in um
        """
        self.Z0 = self.Z = np.asarray(zRaw, dtype=float) * 1.0e6
        if deltaX is not None:
            self.deltaX = float(deltaX)
        self.stage = RAW

    def setValues(self, Z, deltaX=None):
        """
        Sets the height values of the profile without scaling

        Parameters
        ----------
        Z: []
            The height values in um
        deltaX: float, optional
            The spacing of the samples in um
        """
        self.Z0 = self.Z = np.asarray(Z, dtype=float)
        if deltaX is not None:
            self.deltaX = float(deltaX)
        self.stage = RAW

    def derive(self, Z, stage, **attrs):
        """
        Returns a copy of the profile carrying the processed heights

        Parameters
        ----------
        Z: np.array
            The processed heights in um
        stage: int
            The processing stage reached with Z
        attrs:
            Other attributes to be replaced in the copy

        Raises
        ------
        ValueError
            If the step was already applied or a later step was already applied
        """
        if stage <= self.stage:
            raise ValueError(f'{STAGES[stage]} cannot be applied after {STAGES[self.stage]}')
        new = copy.copy(self)
        new.Z = np.asarray(Z, dtype=float)
        new.stage = stage
        for key, value in attrs.items():
            setattr(new, key, value)
        return new

    @property
    def size(self):
        return self.Z.size

    @property
    def X(self):
        """Positions of the samples in um"""
        return funct.accumulatedPositions(self.Z.size, self.deltaX)

    @property
    def X0(self):
        return funct.accumulatedPositions(self.Z0.size, self.deltaX)

    #################
    # PLOT SECTION  #
    #################
    @options(bplt='bpPrf', save='spPrf')
    def pltPrf(self):
        """Plots the profile"""
        fig, ax = plt.subplots(nrows=1, ncols=1)
        ax.plot(self.X, self.Z, color='teal')
        funct.persFig(
            [ax],
            gridcol='grey',
            xlab='x [um]',
            ylab='z [um]'
        )
        ax.set_title(self.name)

    @options(bplt='bpCom', save='spCom')
    def pltCompare(self):
        """Plots the current profile and the original data"""
        fig, (ax, bx) = plt.subplots(nrows=1, ncols=2)
        ax.plot(self.X0, self.Z0, color='teal')
        bx.plot(self.X, self.Z, color='teal')
        funct.persFig(
            [ax, bx],
            gridcol='grey',
            xlab='x [um]',
            ylab='z [um]'
        )
        ax.set_title(self.name)
        bx.set_title(self.tipConvolutionMessage)
