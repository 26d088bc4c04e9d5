"""
'nmmprofile.filter'
- Applies a filter to a profile:
    - spherical tip convolution (morphological dilation)

The dilation gives the height the centre of a spherical tip reaches
while sliding over the profile, see ISO 16610-41 (Profile Morphological filter).
"""

import numpy as np

from nmmprofile import formats, profile


class Filter:
    def applyFilter(self, obj):
        pass


def tipKernel(radius, deltaX):
    """
    Heights of the spherical tip sampled with the profile spacing

    Parameters
    ----------
    radius: float
        The tip radius in um
    deltaX: float
        The sample spacing in um

    Returns
    ----------
    kernel: np.array
        kernel[k] is the tip height at a distance k * deltaX from its axis,
        k = 0 ... n with n = floor(radius / deltaX); empty if n < 1
    """
    if radius <= 0 or deltaX <= 0:
        return np.array([], dtype=float)
    n = int(radius / deltaX)
    if n < 1:
        return np.array([], dtype=float)
    x = np.arange(n + 1) * deltaX
    # rounding can push the last sample slightly outside the sphere
    return np.sqrt(np.maximum(0.0, radius ** 2 - x ** 2))


def dilate(z, kernel):
    """
    Grey dilation of the profile with a symmetric kernel,
    samples outside the profile do not take part

    Parameters
    ----------
    z: np.array
        The height values
    kernel: np.array
        Half kernel, kernel[k] is applied at offsets -k and +k

    Returns
    ----------
    dilated: np.array
        dilated[i] = max_j(kernel[|j|] + z[i + j]) for 0 <= i + j < len(z)
    """
    z = np.asarray(z, dtype=float)
    if kernel.size == 0 or z.size == 0:
        return z.copy()
    dilated = z + kernel[0]
    for k in range(1, kernel.size):
        if k >= z.size:
            break
        # neighbour on the right of sample i, and on the left
        np.maximum(dilated[:-k], z[k:] + kernel[k], out=dilated[:-k])
        np.maximum(dilated[k:], z[:-k] + kernel[k], out=dilated[k:])
    return dilated


class TipConvolution(Filter):
    def __init__(self, radius):
        self.radius = radius

    def applyFilter(self, obj: profile.Profile):
        return self.dilation(obj, radius=self.radius)

    @staticmethod
    def dilation(obj: profile.Profile, radius):
        """
        Simulates the profile measured with a spherical tip of the given radius.
        A radius <= 0 or smaller than the sample spacing leaves the heights
        unchanged. The filter can be applied only once to a profile.

        Parameters
        ----------
        obj: profile.Profile
            The profile object on wich the filter is applied
        radius: float
            The radius of the tip in um

        Returns
        ----------
        convolved: profile.Profile
            A new profile, its tipConvolutionMessage records the radius used
        """
        kernel = tipKernel(radius, obj.deltaX)
        if kernel.size == 0:
            return obj.derive(obj.Z.copy(), profile.CONVOLVED,
                              tipConvolutionMessage=profile.NO_TIP_CONVOLUTION)
        return obj.derive(dilate(obj.Z, kernel), profile.CONVOLVED,
                          tipConvolutionMessage=f'spherical tip radius {formats.shortest(radius)} µm')
