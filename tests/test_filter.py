import numpy as np
import pytest
from hypothesis import given, strategies as st
from hypothesis.extra.numpy import arrays

from nmmprofile import filter, form, profile
from nmmprofile.form import ReferenceTo

from helper_functions import make_profile


class TestTipKernel:
    def test_samples_of_the_sphere(self) -> None:
        kernel = filter.tipKernel(5.0, 3.0)
        np.testing.assert_allclose(kernel, [5.0, 4.0])

    def test_boundary_sample_is_clamped(self) -> None:
        kernel = filter.tipKernel(1.0, 0.5)
        np.testing.assert_allclose(kernel, [1.0, np.sqrt(0.75), 0.0])
        assert np.all(np.isfinite(kernel))

    @pytest.mark.parametrize(
        ("radius", "delta_x"),
        (
            pytest.param(0.0, 1.0, id="zero radius"),
            pytest.param(-2.0, 1.0, id="negative radius"),
            pytest.param(0.5, 1.0, id="radius below spacing"),
            pytest.param(2.0, 0.0, id="zero spacing"),
        ),
    )
    def test_empty(self, radius: float, delta_x: float) -> None:
        assert filter.tipKernel(radius, delta_x).size == 0


class TestDilate:
    def test_hand_computed(self) -> None:
        # kernel heights 5 at the axis and 4 one sample away
        dilated = filter.dilate([0.0, 0.0, 3.0, 0.0, 0.0], np.array([5.0, 4.0]))
        np.testing.assert_allclose(dilated, [5.0, 7.0, 8.0, 7.0, 5.0])

    def test_samples_outside_are_excluded(self) -> None:
        # a wrap around would lift the first sample with the last one
        dilated = filter.dilate([0.0, 0.0, 0.0, 10.0], np.array([1.0, 0.5]))
        np.testing.assert_allclose(dilated, [1.0, 1.0, 10.5, 11.0])

    def test_kernel_wider_than_profile(self) -> None:
        dilated = filter.dilate([2.0, 0.0], np.array([3.0, 2.0, 1.0, 0.5]))
        np.testing.assert_allclose(dilated, [5.0, 4.0])

    def test_input_untouched(self) -> None:
        z = np.array([0.0, 1.0, 0.0])
        filter.dilate(z, np.array([1.0, 1.0]))
        np.testing.assert_array_equal(z, [0.0, 1.0, 0.0])


@given(
    arrays(np.float64, st.integers(min_value=1, max_value=50),
           elements=st.floats(min_value=-100.0, max_value=100.0)),
    st.floats(min_value=1e-3, max_value=50.0),
    st.floats(min_value=0.1, max_value=5.0),
)
def test_dilation_never_lowers_a_sample(z, radius, delta_x) -> None:
    dilated = filter.dilate(z, filter.tipKernel(radius, delta_x))
    assert np.all(dilated >= z)


class TestTipConvolution:
    def test_records_radius(self) -> None:
        prf = make_profile([0.0, 0.0, 3.0, 0.0, 0.0], delta_x=3.0)
        convolved = filter.TipConvolution.dilation(prf, radius=5.0)
        assert convolved.stage == profile.CONVOLVED
        assert convolved.tipConvolutionMessage == "spherical tip radius 5 µm"
        np.testing.assert_allclose(convolved.Z, [5.0, 7.0, 8.0, 7.0, 5.0])
        np.testing.assert_allclose(prf.Z, [0.0, 0.0, 3.0, 0.0, 0.0])

    def test_radius_written_in_full(self) -> None:
        convolved = filter.TipConvolution.dilation(make_profile([0.0, 1.0, 0.0], delta_x=1.0), radius=12.3456789)
        assert convolved.tipConvolutionMessage == "spherical tip radius 12.3456789 µm"

    @pytest.mark.parametrize("radius", (0.0, 0.5))
    def test_identity(self, radius: float) -> None:
        prf = make_profile([1.0, 4.0, 2.0], delta_x=1.0)
        convolved = filter.TipConvolution.dilation(prf, radius=radius)
        np.testing.assert_array_equal(convolved.Z, prf.Z)
        assert convolved.tipConvolutionMessage == profile.NO_TIP_CONVOLUTION
        assert convolved.stage == profile.CONVOLVED

    def test_filter_object(self) -> None:
        prf = form.ProfileForm.level(make_profile([1.0, 3.0, 1.0], delta_x=1.0), ReferenceTo.Minimum)
        convolved = filter.TipConvolution(radius=2.0).applyFilter(prf)
        np.testing.assert_allclose(convolved.Z, [np.sqrt(3.0) + 2.0, 4.0, np.sqrt(3.0) + 2.0])

    def test_applied_only_once(self) -> None:
        convolved = filter.TipConvolution.dilation(make_profile([0.0, 1.0, 0.0]), radius=2.0)
        with pytest.raises(ValueError, match="tip convolution"):
            filter.TipConvolution.dilation(convolved, radius=2.0)
