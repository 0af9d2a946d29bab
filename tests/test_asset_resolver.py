from pillfall.rendering.asset_resolver import AssetState, ElementKind, ImagePathResolver, Orientation
from pillfall.systems.board_ops import pair_orientations


def test_virus_paths():
    resolver = ImagePathResolver()
    assert resolver.resolve(ElementKind.VIRUS, "blue") == "img/covid_blue.png"
    assert resolver.resolve(ElementKind.VIRUS, "blue", state=AssetState.MARKED) == "img/blue_x.png"


def test_pill_paths_by_orientation():
    resolver = ImagePathResolver("assets/")
    assert resolver.resolve(ElementKind.PILL, "brown", Orientation.LEFT) == "assets/brown_left.png"
    assert resolver.resolve(ElementKind.PILL, "brown", Orientation.BOTTOM) == "assets/brown_down.png"
    assert resolver.resolve(ElementKind.PILL, "brown") == "assets/brown_dot.png"
    assert resolver.resolve(ElementKind.PILL, "brown", Orientation.TOP, AssetState.MARKED) == "assets/brown_o.png"


def test_pair_orientations():
    assert pair_orientations((3, 2), (3, 3)) == (Orientation.LEFT, Orientation.RIGHT)
    assert pair_orientations((3, 3), (3, 2)) == (Orientation.RIGHT, Orientation.LEFT)
    assert pair_orientations((2, 3), (3, 3)) == (Orientation.TOP, Orientation.BOTTOM)
    assert pair_orientations((4, 3), (3, 3)) == (Orientation.BOTTOM, Orientation.TOP)
