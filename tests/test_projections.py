"""Tests for the UTM and Indian Grid transforms."""

import logging

import numpy as np
import pytest
from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError

from common.exceptions import InvalidInputError, ProjectionError
from common.types import (
    GeographicPoint,
    Hemisphere,
    IndianGridCoordinate,
    IndianGridZone,
    UTMCoordinate,
)
from geospatial import projections
from geospatial.projections import (
    LambertConformalConic,
    TransverseMercator,
    from_indian_grid,
    from_utm,
    to_indian_grid,
    to_utm,
)
from geospatial.zones import INDIAN_GRID_ZONES, UTMZone, utm_zone_for_longitude

IIA_TOWGS84 = (
    "+proj=lcc +lat_1=26 +lat_0=26 +lon_0=74 +k_0=0.9987864 "
    "+x_0=2743196.4 +y_0=914398.8 +ellps=evrst30 "
    "+towgs84=295,736,254,0,0,0,0 +units=m +no_defs"
)


class TestZones:

    @pytest.mark.parametrize("lon, zone", [
        (-180.0, 1), (-174.0, 2), (0.0, 31), (77.209, 43), (179.999, 60),
    ])
    def test_zone_for_longitude(self, lon, zone):
        assert utm_zone_for_longitude(lon) == zone

    def test_eastern_edge_belongs_to_zone_60(self):
        assert utm_zone_for_longitude(180.0) == 60

    @pytest.mark.parametrize("number", [0, 61, -3, 43.5, True])
    def test_invalid_zone_number(self, number):
        with pytest.raises(InvalidInputError):
            UTMZone(number, Hemisphere.NORTH)

    def test_central_meridian(self):
        assert UTMZone(43, Hemisphere.NORTH).central_meridian_deg == 75.0

    def test_indian_grid_table_is_complete_and_read_only(self):
        assert set(INDIAN_GRID_ZONES) == set(IndianGridZone)
        with pytest.raises(TypeError):
            INDIAN_GRID_ZONES[IndianGridZone.IA] = None


class TestUTM:

    def test_new_delhi_matches_epsg_reference(self, new_delhi):
        reference = Transformer.from_crs("EPSG:4326", "EPSG:32643", always_xy=True)
        ref_e, ref_n = reference.transform(new_delhi.longitude, new_delhi.latitude)

        coord = to_utm(new_delhi)

        assert coord.zone == 43
        assert coord.hemisphere is Hemisphere.NORTH
        assert coord.zone_identifier == "43N"
        assert 715_000 < coord.easting < 717_500
        assert 3_160_000 < coord.northing < 3_172_000
        np.testing.assert_allclose([coord.easting, coord.northing], [ref_e, ref_n], atol=0.01)

    def test_southern_hemisphere_uses_false_northing(self):
        coord = to_utm(GeographicPoint(-33.8688, 151.2093))  # Sydney

        reference = Transformer.from_crs("EPSG:4326", "EPSG:32756", always_xy=True)
        ref_e, ref_n = reference.transform(151.2093, -33.8688)

        assert coord.zone == 56
        assert coord.hemisphere is Hemisphere.SOUTH
        np.testing.assert_allclose([coord.easting, coord.northing], [ref_e, ref_n], atol=0.01)

    def test_zone_override_is_used_verbatim(self, new_delhi):
        coord = to_utm(new_delhi, zone_override=44)

        reference = Transformer.from_crs("EPSG:4326", "EPSG:32644", always_xy=True)
        ref_e, ref_n = reference.transform(new_delhi.longitude, new_delhi.latitude)

        assert coord.zone == 44
        assert coord.easting < 500_000  # west of the zone 44 central meridian
        np.testing.assert_allclose([coord.easting, coord.northing], [ref_e, ref_n], atol=0.01)

    @pytest.mark.parametrize("override", [0, 61, 12.5, "43"])
    def test_invalid_zone_override(self, new_delhi, override):
        with pytest.raises(InvalidInputError):
            to_utm(new_delhi, zone_override=override)

    def test_round_trip_10000_points(self, rng, angle_diff):
        lats = rng.uniform(-80.0, 84.0, size=10_000)
        lons = rng.uniform(-180.0, 180.0, size=10_000)

        for lat, lon in zip(lats, lons):
            point = GeographicPoint(lat, lon)
            coord = to_utm(point)
            back = from_utm(coord)
            again = to_utm(back, zone_override=coord.zone)

            assert abs(back.latitude - point.latitude) < 1e-7
            assert angle_diff(back.longitude, point.longitude) < 1e-7
            assert abs(again.easting - coord.easting) < 1e-3
            assert abs(again.northing - coord.northing) < 1e-3

    def test_inverse_accepts_hemisphere_string(self, new_delhi):
        coord = to_utm(new_delhi)
        back = from_utm(UTMCoordinate(coord.easting, coord.northing, 43, "N"))
        assert back.latitude == pytest.approx(new_delhi.latitude, abs=1e-9)

    def test_inverse_rejects_unknown_hemisphere(self):
        with pytest.raises(InvalidInputError):
            from_utm(UTMCoordinate(500_000.0, 0.0, 31, "X"))

    @pytest.mark.parametrize("easting, northing", [
        (float("nan"), 0.0), (500_000.0, float("inf")),
    ])
    def test_inverse_rejects_non_finite(self, easting, northing):
        with pytest.raises(InvalidInputError):
            from_utm(UTMCoordinate(easting, northing, 31, Hemisphere.NORTH))

    def test_proj4_string(self):
        projection = TransverseMercator(UTMZone(43, Hemisphere.SOUTH))
        assert "+zone=43" in projection.proj4_string
        assert "+south" in projection.proj4_string
        assert projection.name == "UTM zone 43S"


class TestIndianGrid:

    def test_new_delhi_zone_iia_matches_towgs84_reference(self, new_delhi):
        reference = Transformer.from_crs(CRS.from_epsg(4326), CRS.from_proj4(IIA_TOWGS84),
                                         always_xy=True)
        ref_e, ref_n = reference.transform(new_delhi.longitude, new_delhi.latitude)

        coord = to_indian_grid(new_delhi, "IIA")

        assert coord.zone is IndianGridZone.IIA
        assert coord.zone_identifier == "IIA"
        np.testing.assert_allclose([coord.easting, coord.northing], [ref_e, ref_n], atol=0.05)

    @pytest.mark.parametrize("zone", list(IndianGridZone))
    def test_published_definition_reproduces_transform(self, new_delhi, zone):
        projection = LambertConformalConic(zone)
        assert "+towgs84=295,736,254,0,0,0,0" in projection.proj4_string
        external = Transformer.from_crs("EPSG:4326", CRS.from_proj4(projection.proj4_string),
                                        always_xy=True)
        x, y = external.transform(new_delhi.longitude, new_delhi.latitude)
        coord = to_indian_grid(new_delhi, zone)
        np.testing.assert_allclose([coord.easting, coord.northing], [x, y], atol=1e-6)

    def test_zone_is_parsed_case_insensitively(self, new_delhi):
        assert to_indian_grid(new_delhi, "iia") == to_indian_grid(new_delhi, IndianGridZone.IIA)

    @pytest.mark.parametrize("zone", ["V", "", None, "IIC"])
    def test_unknown_zone(self, new_delhi, zone):
        with pytest.raises(InvalidInputError):
            to_indian_grid(new_delhi, zone)

    def test_zone_is_never_inferred(self, new_delhi):
        # Delhi lies in IIA but any zone may be requested
        ia = to_indian_grid(new_delhi, IndianGridZone.IA)
        iia = to_indian_grid(new_delhi, IndianGridZone.IIA)
        assert ia.zone is IndianGridZone.IA
        assert (ia.easting, ia.northing) != (iia.easting, iia.northing)

    def test_round_trip_10000_points(self, rng, angle_diff):
        lats = rng.uniform(20.0, 32.0, size=10_000)
        lons = rng.uniform(66.0, 82.0, size=10_000)

        for lat, lon in zip(lats, lons):
            point = GeographicPoint(lat, lon)
            coord = to_indian_grid(point, IndianGridZone.IIA)
            back = from_indian_grid(coord)
            again = to_indian_grid(back, IndianGridZone.IIA)

            assert abs(back.latitude - point.latitude) < 1e-7
            assert angle_diff(back.longitude, point.longitude) < 1e-7
            assert abs(again.easting - coord.easting) < 1e-3
            assert abs(again.northing - coord.northing) < 1e-3

    @pytest.mark.parametrize("zone", list(IndianGridZone))
    def test_round_trip_every_zone(self, rng, zone):
        params = INDIAN_GRID_ZONES[zone]
        for _ in range(50):
            point = GeographicPoint(params.origin_latitude + rng.uniform(-5, 5),
                                    params.central_meridian + rng.uniform(-6, 6))
            back = from_indian_grid(to_indian_grid(point, zone))
            assert back.latitude == pytest.approx(point.latitude, abs=1e-7)
            assert back.longitude == pytest.approx(point.longitude, abs=1e-7)

    def test_zone_origin_maps_near_false_origin(self):
        params = INDIAN_GRID_ZONES[IndianGridZone.IIA]
        projection = LambertConformalConic(IndianGridZone.IIA)
        # the datum shift moves the WGS84 origin by a few hundred metres
        x, y = projection.to_projected(params.origin_latitude, params.central_meridian)
        assert abs(x - params.false_easting) < 1000
        assert abs(y - params.false_northing) < 1000


class _FailingTransformer:

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def transform(self, *args, **kwargs):
        if self.error is not None:
            raise self.error
        return self.result


class TestProjectionFailures:

    def test_non_finite_output_raises(self, monkeypatch, new_delhi, caplog):
        projection = TransverseMercator(UTMZone(43, Hemisphere.NORTH))
        projection._to_proj = _FailingTransformer(result=(float("inf"), float("inf")))
        monkeypatch.setattr(projections, "_utm_projection", lambda zone: projection)

        with caplog.at_level(logging.WARNING, logger="geospatial.projections"):
            with pytest.raises(ProjectionError):
                to_utm(new_delhi)

        assert "UTM zone 43N" in caplog.text

    def test_proj_error_is_wrapped(self, monkeypatch, new_delhi):
        projection = TransverseMercator(UTMZone(43, Hemisphere.NORTH))
        projection._to_geo = _FailingTransformer(error=ProjError("boom"))
        monkeypatch.setattr(projections, "_utm_projection", lambda zone: projection)

        with pytest.raises(ProjectionError) as info:
            from_utm(UTMCoordinate(716_000.0, 3_166_000.0, 43, Hemisphere.NORTH))
        assert isinstance(info.value.__cause__, ProjError)

    def test_indian_grid_failure(self, monkeypatch, new_delhi):
        projection = LambertConformalConic(IndianGridZone.IIA)
        projection._to_proj = _FailingTransformer(result=(float("nan"), 0.0))
        projection._to_geo = _FailingTransformer(error=ProjError("boom"))
        monkeypatch.setattr(projections, "_indian_grid_projection", lambda zone: projection)

        with pytest.raises(ProjectionError):
            to_indian_grid(new_delhi, IndianGridZone.IIA)
        with pytest.raises(ProjectionError):
            from_indian_grid(IndianGridCoordinate(2_800_000.0, 1_200_000.0, IndianGridZone.IIA))

    def test_projection_error_is_arithmetic_error(self):
        assert issubclass(ProjectionError, ArithmeticError)
