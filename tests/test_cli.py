"""
Test CLI

Runs the argparse entrypoint over GeoPackage files written to a temp dir.
"""
import geopandas as gpd
import pytest

from riversnap.cli import build_parser, main


@pytest.fixture
def layer_paths(tmp_path, sample_points, sample_lines):
    points_path = tmp_path / "sites.gpkg"
    lines_path = tmp_path / "streams.gpkg"
    sample_points.to_file(points_path, driver="GPKG")
    sample_lines.to_file(lines_path, driver="GPKG")
    return points_path, lines_path


class TestCli:
    def test_parser_defaults(self):
        args = build_parser().parse_args(["a.gpkg", "b.gpkg", "--out", "o.gpkg", "--search-dist", "10"])
        assert args.name_column == "name"
        assert args.fallback_policy == "first"
        assert args.search_dist == 10.0
        assert args.workers is None

    def test_end_to_end(self, tmp_path, layer_paths):
        points_path, lines_path = layer_paths
        out = tmp_path / "out" / "matched.gpkg"
        rc = main([str(points_path), str(lines_path), "--out", str(out), "--search-dist", "5", "--include-line-id"])
        assert rc == 0
        result = gpd.read_file(out)
        assert len(result) == 6
        assert list(result["match"]) == ["FALSE", "FALSE", "MAYBE", "FALSE", "TRUE", "TRUE"]
        assert "matched_line" in result.columns

    def test_missing_input_file(self, tmp_path, layer_paths):
        _, lines_path = layer_paths
        rc = main([str(tmp_path / "nope.gpkg"), str(lines_path), "--out", str(tmp_path / "o.gpkg"), "--search-dist", "5"])
        assert rc == 1

    def test_configuration_error_exit_code(self, tmp_path, layer_paths):
        points_path, lines_path = layer_paths
        out = tmp_path / "o.gpkg"
        rc = main([str(points_path), str(lines_path), "--out", str(out), "--search-dist", "5", "--name-column", "gnis_name"])
        assert rc == 2
        assert not out.exists()

    def test_non_positive_search_dist(self, tmp_path, layer_paths):
        points_path, lines_path = layer_paths
        rc = main([str(points_path), str(lines_path), "--out", str(tmp_path / "o.gpkg"), "--search-dist", "0"])
        assert rc == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
