from dataclasses import replace

import numpy as np
import pytest

from mandelbrot_bands import (
    Band,
    ConfigurationError,
    Limit,
    PixelBounds,
    PlaneRegion,
    RenderParameters,
    band_rows,
    escape_time,
    pixel_grid,
    pixel_to_point,
    pixel_value,
    render,
    render_band,
    split_bands,
)


@pytest.fixture
def params():
    # Steps of 1/16 and 5/128 keep every band corner exactly representable.
    return RenderParameters(
        width=48,
        height=64,
        upper_left=complex(-2.0, 1.25),
        lower_right=complex(1.0, -1.25),
        limit=Limit.VERY_LOW,
    )


def test_render_matches_per_pixel_evaluation():
    params = RenderParameters(6, 5, complex(-2.0, 1.0), complex(1.0, -1.0), Limit.LOW)
    pixels = render(params)

    assert pixels.dtype == np.uint8
    assert pixels.shape == (30,)
    for row in range(5):
        for column in range(6):
            point = pixel_to_point(params.bounds, (column, row), params.region)
            expected = pixel_value(escape_time(point, 256), 256)
            assert pixels[row * 6 + column] == expected


def test_render_is_idempotent(params):
    first = render(params)
    second = render(params)
    assert first.tobytes() == second.tobytes()


@pytest.mark.parametrize("workers", [2, 5, 64, 100])
def test_parallel_matches_sequential(params, workers):
    sequential = render(params)
    parallel = render(replace(params, workers=workers))

    assert np.any(sequential == 0)
    assert np.any(sequential != 0)
    assert parallel.tobytes() == sequential.tobytes()


# Regions near the set's boundary whose band corners do not fall on exact
# binary fractions.
@pytest.mark.parametrize(
    "width, height, upper_left, lower_right, workers",
    [
        (14, 31, complex(-0.7425846114145855, 0.1313617061207838),
         complex(-0.742584240546522, 0.13136131322283798), 17),
        (27, 19, complex(-0.7442064291578704, 0.13156078908374624),
         complex(-0.7440714800009293, 0.13138108384259853), 2),
    ],
)
def test_parallel_matches_sequential_off_grid(width, height, upper_left, lower_right, workers):
    params = RenderParameters(width, height, upper_left, lower_right, Limit.HIGH)
    sequential = render(params)

    for count in sorted({1, 2, 5, workers, height}):
        parallel = render(replace(params, workers=count))
        assert parallel.tobytes() == sequential.tobytes(), count


def test_band_points_match_full_image_points():
    bounds = PixelBounds(14, 31)
    region = PlaneRegion(complex(-0.7425846114145855, 0.1313617061207838),
                         complex(-0.742584240546522, 0.13136131322283798))

    for band in split_bands(bounds, region, 17):
        cr, ci = pixel_grid(band.image_bounds, band.image_region, band.top, band.bounds.height)
        for row in range(band.bounds.height):
            for column in range(bounds.width):
                point = pixel_to_point(bounds, (column, band.top + row), region)
                assert (cr[row, column], ci[row, column]) == (point.real, point.imag)


def test_render_band_matches_scalar_kernel():
    bounds = PixelBounds(27, 19)
    region = PlaneRegion(complex(-0.7442064291578704, 0.13156078908374624),
                         complex(-0.7440714800009293, 0.13138108384259853))
    pixels = np.zeros(bounds.size, dtype=np.uint8)

    render_band(pixels, Band.whole(bounds, region), 1024)

    for row in range(bounds.height):
        for column in range(bounds.width):
            point = pixel_to_point(bounds, (column, row), region)
            assert pixels[row * bounds.width + column] == pixel_value(escape_time(point, 1024), 1024)


def test_integer_limit_matches_tier(params):
    as_int = RenderParameters(
        params.width, params.height, params.upper_left, params.lower_right, 128
    )
    assert render(as_int).tobytes() == render(params).tobytes()


def test_split_bands_layout():
    bounds = PixelBounds(4, 10)
    region = PlaneRegion(complex(-2.0, 1.0), complex(2.0, -1.0))

    bands = split_bands(bounds, region, 3)

    assert [band.top for band in bands] == [0, 4, 8]
    assert [band.bounds.height for band in bands] == [4, 4, 2]
    assert all(band.bounds.width == 4 for band in bands)
    assert bands[0].start == 0
    assert bands[-1].stop == bounds.size
    for current, following in zip(bands, bands[1:]):
        assert current.stop == following.start


def test_split_bands_more_workers_than_rows():
    bounds = PixelBounds(3, 4)
    region = PlaneRegion(complex(-2.0, 1.0), complex(1.0, -1.0))

    bands = split_bands(bounds, region, 20)

    assert len(bands) == 4
    assert all(band.bounds.height == 1 for band in bands)


def test_band_regions_come_from_full_image_mapping():
    bounds = PixelBounds(4, 8)
    region = PlaneRegion(complex(-2.0, 1.0), complex(2.0, -1.0))

    upper, lower = split_bands(bounds, region, 2)

    assert upper.region == PlaneRegion(complex(-2.0, 1.0), complex(2.0, 0.0))
    assert lower.region == PlaneRegion(complex(-2.0, 0.0), complex(2.0, -1.0))


def test_render_band_rejects_mismatched_view():
    bounds = PixelBounds(4, 4)
    region = PlaneRegion(complex(-2.0, 1.0), complex(1.0, -1.0))
    with pytest.raises(AssertionError):
        render_band(np.zeros(15, dtype=np.uint8), Band.whole(bounds, region), 128)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0),
        dict(height=0),
        dict(workers=0),
        dict(limit=0),
        dict(limit=2.7),
        dict(limit=True),
        dict(limit="high"),
        dict(width=8.0),
        dict(workers=2.5),
        dict(upper_left=complex(1.0, -1.0), lower_right=complex(-2.0, 1.0)),
    ],
)
def test_invalid_configuration_rejected(kwargs):
    values = dict(
        width=8,
        height=8,
        upper_left=complex(-2.0, 1.0),
        lower_right=complex(1.0, -1.0),
        limit=Limit.LOW,
        workers=2,
    )
    values.update(kwargs)
    with pytest.raises(ConfigurationError):
        render(RenderParameters(**values))


def test_band_rows():
    assert band_rows(10, 3) == 4
    assert band_rows(64, 5) == 13
    assert band_rows(64, 64) == 1
    assert band_rows(4, 20) == 1
    assert band_rows(7, 1) == 7


def test_bands_keep_full_image_mapping():
    bounds = PixelBounds(4, 10)
    region = PlaneRegion(complex(-2.0, 1.0), complex(2.0, -1.0))

    for band in split_bands(bounds, region, 3):
        assert band.image_bounds == bounds
        assert band.image_region == region


def test_numpy_integer_limit_accepted():
    params = RenderParameters(4, 4, complex(-2.0, 1.0), complex(1.0, -1.0), np.int64(64))
    assert render(params).shape == (16,)
