import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest  # noqa: E402

from nmmprofile import formats, profile  # noqa: E402
from nmmprofile.funct import rcs  # noqa: E402

from helper_functions import MODIFIED, make_profile  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rcs():
    """The parameters are global, every test starts from the packaged ones"""
    rcs.reset()
    rcs.params["verbose"] = False
    yield
    rcs.reset()


@pytest.fixture
def ctx() -> formats.FormatContext:
    return formats.FormatContext(
        modDate=MODIFIED,
        appName="nmmprofile",
        appVersion="1.0.0",
        createdBy="Tester, Lab",
        manufacturer="Lab / NMM",
    )


@pytest.fixture
def simple_profile() -> profile.Profile:
    return make_profile([1.0, 2.0, 3.0], delta_x=1.0)
