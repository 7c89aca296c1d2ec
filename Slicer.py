import argparse
import logging
import sys

from geometry_ops import Vector3
from layer_slicer import LayerSlicer
from mesh_stats import Mesh
from slicer_config import DEFAULT_LAYER_HEIGHT, SlicerConfig
from stl_parser import read_stl

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Load an STL mesh, report its statistics and slice it into layers"
    )
    parser.add_argument("stl_file", help="ASCII or binary STL file")
    parser.add_argument(
        "--layer-height", type=float, default=DEFAULT_LAYER_HEIGHT,
        help=f"Layer thickness in mm (default: {DEFAULT_LAYER_HEIGHT})",
    )
    parser.add_argument("--scale", type=float, default=None, help="Uniform scale factor")
    parser.add_argument(
        "--translate", type=float, nargs=3, metavar=("X", "Y", "Z"), default=None,
        help="Translation applied after scaling",
    )
    parser.add_argument(
        "--z-height", type=float, default=None,
        help="Move the model so its lowest point sits at this Z",
    )
    parser.add_argument(
        "--anchor-origin", action="store_true",
        help="Place layer planes at multiples of the layer height from Z=0",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_mesh_report(mesh):
    min_bound, max_bound = mesh.bounding_box
    print(f"Successfully read {mesh.triangle_count} triangles ({mesh.rejected_count} rejected).")
    print(f"The total surface area of the part is {mesh.total_surface_area:.4f} mm^2.")
    print(f"The total volume of the part is {mesh.volume():.4f} mm^3.")
    print(f"The model bounding box is: Minimum: {tuple(min_bound)} and Maximum: {tuple(max_bound)}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SlicerConfig(layer_height=args.layer_height, anchor_to_origin=args.anchor_origin).validate()
        mesh = Mesh.from_triangles(read_stl(args.stl_file), epsilon=config.epsilon)
        if mesh.is_empty:
            logger.warning("No valid triangles in %s", args.stl_file)
            print("Failed to read STL file.", file=sys.stderr)
            return 1

        if args.scale is not None:
            mesh.scale(args.scale)
        if args.translate is not None:
            mesh.translate(Vector3(*args.translate))
        if args.z_height is not None:
            mesh.set_z_height(args.z_height)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_mesh_report(mesh)

    layers = LayerSlicer(mesh, config=config).slice_model()
    print(f"Sliced into {len(layers)} layers of {config.layer_height} mm.")
    for layer in layers:
        print(f"Layer Z={layer.height:.4f}: {len(layer.lines)} segments")

    return 0


if __name__ == "__main__":
    sys.exit(main())
