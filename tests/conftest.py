import pytest

from compat_mapper import ReferenceEntry, build_reference_index


@pytest.fixture
def sample_catalog():
    return [
        ReferenceEntry('Axis', 'P3245-LVE', '10.12', ''),
        ReferenceEntry('Axis', 'Q6155-E', '9.80', 'PTZ limited to presets'),
        ReferenceEntry('Hikvision', 'DS-2CD2143G0-I', 'V5.5.0', 'RTSP support only'),
        ReferenceEntry('Hanwha Vision', 'XNV-6080R', '1.41', ''),
        ReferenceEntry('Bosch', 'FLEXIDOME 5100i', '8.10', ''),
    ]


@pytest.fixture
def sample_index(sample_catalog):
    return build_reference_index(sample_catalog)


@pytest.fixture
def empty_index():
    return build_reference_index([])
