"""
--------
Package for the conversion of NMM scan profiles to standard profile file formats

Containers
--------
- profile: profile heights, spacing and metadata
- measfile_io: scan data and scan file readers

>>> scan = measfile_io.openScan(fname)

Processings
--------
    - form: height reference (leveling)
    - filter: spherical tip convolution
    - cutter: trimming of the profile

The processings return new profiles and must be applied in this order:
>>> prf = form.ProfileForm.level(prf, form.ReferenceTo.Lsq)
>>> prf = filter.TipConvolution.dilation(prf, radius=2)
>>> prf = cutter.ProfileCutter.cut(prf, start=10, length=500)

Output
--------
    - formats: text encodings (txt, sig, prf, pr, smd, sdf, csv)
    - writer: writes one format to a file
    - converter: batch over profiles and formats
    - cli: the nmm2profile command

Structure
---------

```mermaid
graph RL;
    A[nmmprofile.cli]--> B & C;
    B[nmmprofile.converter]--> D & E & F & G & H;
    C[nmmprofile.measfile_io];
    D[nmmprofile.form]--> I[nmmprofile.profile];
    E[nmmprofile.filter]--> I;
    F[nmmprofile.cutter]--> I;
    H[nmmprofile.writer]--> G[nmmprofile.formats]--> I;
```

Dependencies
------------
This package depends on the following packages
- numpy
- scipy
- matplotlib
- alive_progress
- click

To install all packages run:
>>> pip install -e .

To view documentation interactively run:
>>> pip install pdoc
>>> python3 -m pdoc nmmprofile --math --mermaid
and open the localhost server in the browser.
"""

__docformat__ = 'numpy'
__version__ = '1.0.0'
