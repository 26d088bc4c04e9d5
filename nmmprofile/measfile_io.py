# -*- coding: utf-8 -*-
"""
'nmmprofile.measfile_io'
Scan data consumed by the converter and readers for:
- ISO 25178-71 ascii sdf (aISO / aBCR), one or more profiles
- NMM ascii export (LRSPM, Gaoliang), one profile per scan line

Height values handed to the converter are in m,
the sample spacing (scanFieldDeltaX) is in m.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

import numpy as np

from nmmprofile.exceptions import MissingInputError, ScanFormatError, UnknownChannelError


class ScanDirectionStatus(Enum):
    Unknown = 0
    NoData = 1
    ForwardOnly = 2
    ForwardAndBackward = 3


class TopographyProcessType(Enum):
    ForwardOnly = 0
    BackwardOnly = 1
    Average = 2
    Difference = 3


@dataclass
class ScanMetadata:
    creationDate: datetime
    sampleIdentifier: str
    fileName: str
    numberOfProfiles: int
    numberOfDataPoints: int
    scanStatus: ScanDirectionStatus
    scanFieldDeltaX: float  # m


class ScanData(ABC):
    """Interface of the scan data used by the converter"""
    metadata: ScanMetadata
    defaultChannel: str

    @abstractmethod
    def columnPresent(self, symbol):
        pass

    @abstractmethod
    def extractProfile(self, symbol, index, processType=TopographyProcessType.ForwardOnly):
        """Heights in m of profile index (1 based) of the channel"""
        pass


class GridScanData(ScanData):
    """
    Scan data held in memory, one 2D array (profiles x points) per channel
    and scan direction
    """
    def __init__(self, metadata, forward, backward=None, defaultChannel=None):
        """
        Parameters
        ----------
        metadata: ScanMetadata
        forward: dict
            channel symbol -> 2D array of heights in m
        backward: dict, optional
            channel symbol -> 2D array of the backward scan
        defaultChannel: str, optional
            The channel used when none is requested, by default the first one
        """
        self.metadata = metadata
        self.forward = {k: np.atleast_2d(np.asarray(v, dtype=float)) for k, v in forward.items()}
        self.backward = {k: np.atleast_2d(np.asarray(v, dtype=float)) for k, v in (backward or {}).items()}
        self.defaultChannel = defaultChannel if defaultChannel is not None else next(iter(self.forward), None)

    def columnPresent(self, symbol):
        return symbol in self.forward

    def extractProfile(self, symbol, index, processType=TopographyProcessType.ForwardOnly):
        if not self.columnPresent(symbol):
            raise UnknownChannelError(f'Channel {symbol} not in scan data')
        if not 1 <= index <= self.forward[symbol].shape[0]:
            raise IndexError(f'profile {index} not in 1 ... {self.forward[symbol].shape[0]}')
        fwd = self.forward[symbol][index - 1]
        if processType is TopographyProcessType.ForwardOnly:
            return fwd.copy()
        if symbol not in self.backward:
            raise ScanFormatError(f'No backward scan data for channel {symbol}')
        # the backward scan is stored in its own scan direction
        bwd = self.backward[symbol][index - 1][::-1]
        if processType is TopographyProcessType.BackwardOnly:
            return bwd.copy()
        if processType is TopographyProcessType.Average:
            return (fwd + bwd) / 2
        return fwd - bwd


#
def str2float(s):
    try:
        return float(s)
    except ValueError:
        return np.nan


def _fileDate(fname):
    return datetime.fromtimestamp(os.path.getmtime(fname), tz=timezone.utc)


# SDF ##########################################

def _sdfDate(stamp):
    """ddMMyyyyHHmm"""
    return datetime.strptime(stamp.strip(), '%d%m%Y%H%M')


def read_asciisdf(content):
    """
    Reads an ascii sdf file

    Parameters
    ----------
    content: bytes
        The file content

    Returns
    ----------
    xpixels, ypixels: int
        Points per profile and number of profiles
    dx: float
        Spacing in m
    zmap2D: np.array
        Heights in m, one row per profile
    info: dict
        The header and trailer key / value pairs
    """
    lines = [l.strip() for l in content.decode('utf-8', errors='ignore').splitlines()]
    records = [[]]
    for line in lines:
        if line == '*':
            records.append([])
        else:
            records[-1].append(line)
    if len(records) < 2:
        raise ScanFormatError('sdf data record missing')

    info = {}
    for line in records[0][1:] + (records[2] if len(records) > 2 else []):
        key, sep, value = line.partition('=')
        if sep:
            info[key.strip()] = value.strip()

    def lookup(*keys):
        for key in keys:
            if key in info:
                return info[key]
        raise ScanFormatError(f'sdf header misses {keys[0]}')

    try:
        xpixels = int(lookup('NumPoints'))
        ypixels = int(lookup('NumProfiles'))
        dx = str2float(lookup('Xscale', 'X-scale'))
        z2meter = str2float(lookup('Zscale', 'Z-scale'))
        values = np.array([str2float(v) for line in records[1] for v in line.split()])
        zmap2D = z2meter * values.reshape((ypixels, xpixels))
    except ValueError as exc:
        raise ScanFormatError(f'sdf data not readable: {exc}') from exc
    return xpixels, ypixels, dx, zmap2D, info


def read_sdf(fname, content):
    versionnumber = content[0:8].decode('ascii', errors='ignore')
    if versionnumber.find('aISO') < 0 and versionnumber.find('aBCR') < 0:
        raise ScanFormatError(f'{fname}: no implementation for binary sdf existing so far')
    xpixels, ypixels, dx, zmap2D, info = read_asciisdf(content)

    try:
        created = _sdfDate(info['CreateDate'])
    except (KeyError, ValueError):
        created = _fileDate(fname)
    meta = ScanMetadata(
        creationDate=created,
        sampleIdentifier=info.get('SampleIdentification', Path(fname).stem),
        fileName=str(fname),
        numberOfProfiles=ypixels,
        numberOfDataPoints=xpixels,
        scanStatus=ScanDirectionStatus.ForwardOnly if zmap2D.size else ScanDirectionStatus.NoData,
        scanFieldDeltaX=dx,
    )
    return GridScanData(meta, {'Z': zmap2D})


# NMM ##########################################

def read_NMMgaoliang(fname, content):
    """
    Reads the ascii export of the NMM (LRSPM header, heights in nm,
    xp / yp spacing in mm, one scan line per profile)
    """
    nx = ny = None
    dx = 0
    sensortype = '?'
    head_data = content.split('//DATA')
    if len(head_data) < 2:
        raise ScanFormatError(f'{fname}: //DATA section missing')
    headlines = head_data[0].splitlines()
    data_strlist = head_data[1].split()
    try:
        for line in headlines:
            headinfo = line.split('=')
            if len(headinfo) < 2:
                if line.find('//Detection Head') > -1:
                    sensortype = line.split(':')[-1].strip()
                continue
            if headinfo[0].find('//Pixels per Row') > -1:
                nx = int(headinfo[1].split()[0])
            elif headinfo[0].find('//Scan Lines') > -1:
                ny = int(headinfo[1])
            elif headinfo[0].find('//yp') > -1:
                dx = str2float(headinfo[1]) * 1e-3
    except (ValueError, IndexError) as exc:
        raise ScanFormatError(f'{fname}: header not readable: {exc}') from exc
    if nx is None or ny is None:
        raise ScanFormatError(f'{fname}: scan size missing in header')
    try:
        zmap2D = 1e-9 * np.array(data_strlist).astype(float).reshape(ny, nx)
    except ValueError as exc:
        raise ScanFormatError(f'{fname}: data not readable: {exc}') from exc

    meta = ScanMetadata(
        creationDate=_fileDate(fname),
        sampleIdentifier=f'{Path(fname).stem} (Sensor: {sensortype})',
        fileName=str(fname),
        numberOfProfiles=ny,
        numberOfDataPoints=nx,
        scanStatus=ScanDirectionStatus.ForwardOnly if zmap2D.size else ScanDirectionStatus.NoData,
        scanFieldDeltaX=dx,
    )
    return GridScanData(meta, {'-LZ+AZ': zmap2D})


def openScan(fname):
    """
    Reads a scan file, the type is chosen from the content

    Parameters
    ----------
    fname: str or Path
        The file path

    Returns
    ----------
    scan: ScanData

    Raises
    ------
    MissingInputError
        If the file does not exist
    ScanFormatError
        If the file type is unknown or the content is malformed
    """
    if not Path(fname).is_file():
        raise MissingInputError(f'Missing input file {fname}')
    with open(fname, 'rb') as fin:
        content = fin.read()
    if content[0:8].find(b'aISO') > -1 or content[0:8].find(b'aBCR') > -1:
        return read_sdf(fname, content)
    if content[0:15].find(b'LRSPM') > -1:
        return read_NMMgaoliang(fname, content.decode('ascii', errors='ignore'))
    raise ScanFormatError(f'{fname}: unknown scan file type')
