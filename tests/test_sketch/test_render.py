import matplotlib

matplotlib.use("Agg")

from rapidsketch import Sketch  # noqa: E402


def test_to_png_writes_file(tmp_path):
    s = Sketch(name="Bracket")
    s.add_line((0, 0), (10, 0))
    s.add_arc((10, 5), (10, 0), (10, 10))
    s.add_line_auto((5, -5), (5, 5))

    out = tmp_path / "sketch.png"
    s.to_png(str(out), width=400, height=300)

    assert out.exists()
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_empty_sketch_renders(tmp_path):
    out = tmp_path / "empty.png"
    Sketch().to_png(str(out))
    assert out.exists()
