#!/usr/bin/env python3
"""
PathForge - A Python Monte Carlo Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
import time

import numpy as np

from pathforge.errors import ConfigurationError
from pathforge.image_io import check_output_path, save_image, write_ppm
from pathforge.renderer import Renderer, RenderSettings
from pathforge.scene_parser import load_scene
from pathforge.scenes import SCENES, random_spheres


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Monte Carlo Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene two-spheres --samples 10 --output render.ppm
  python main.py --scene random --width 1200 --samples 500 --output cover.png
  python main.py --scene-file scenes/showcase.yaml --seed 7 --output - > out.ppm
        '''
    )

    parser.add_argument('--scene', type=str, default='showcase', choices=sorted(SCENES),
                        help='Built-in scene to render (default: showcase)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='JSON or YAML scene description (overrides --scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 400)')
    parser.add_argument('--aspect-ratio', type=float, default=None,
                        help='Width / height; height is derived (default: 16/9)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=None, help='Max bounce depth (default: 50)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for a reproducible render')
    parser.add_argument('--vfov', type=float, default=None, help='Vertical field of view in degrees')
    parser.add_argument('--aperture', type=float, default=None, help='Lens aperture (0 = pinhole)')
    parser.add_argument('--focus-dist', type=float, default=None, help='Distance to the focal plane')
    parser.add_argument('--output', type=str, default='output/render.ppm',
                        help="Output filename, or '-' for PPM on stdout (default: output/render.ppm)")
    parser.add_argument('--verbose', '-v', action='store_true', help='Log per-scanline progress')

    return parser


def make_settings(args: argparse.Namespace, base: RenderSettings = None) -> RenderSettings:
    """Merge command-line overrides into the base render settings."""
    overrides = {
        'width': args.width,
        'aspect_ratio': args.aspect_ratio,
        'samples_per_pixel': args.samples,
        'max_depth': args.depth,
        'num_threads': args.threads,
        'seed': args.seed,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}

    if base is None:
        return RenderSettings(**overrides)

    fields = dataclasses.asdict(base)
    # Height follows the (possibly new) width and aspect ratio
    if 'width' in overrides or 'aspect_ratio' in overrides:
        fields['height'] = None
    fields.update(overrides)
    return RenderSettings(**fields)


def load_world(args: argparse.Namespace):
    """Return (world, camera, settings) for the requested scene."""
    camera_overrides = dict(vfov=args.vfov, aperture=args.aperture, focus_dist=args.focus_dist)

    if args.scene_file:
        if any(v is not None for v in camera_overrides.values()) or args.aspect_ratio is not None:
            raise ConfigurationError(
                "Camera and aspect ratio options cannot be combined with --scene-file; "
                "edit the scene's camera section instead"
            )
        world, camera, settings = load_scene(args.scene_file)
        return world, camera, make_settings(args, settings)

    settings = make_settings(args)
    if args.scene == 'random':
        preset = random_spheres(np.random.default_rng(settings.seed))
    else:
        preset = SCENES[args.scene]()
    camera = preset.camera(settings.aspect_ratio, **camera_overrides)
    return preset.world, camera, settings


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    # stdout may carry the image, so the report goes to stderr
    def report(message: str = '', **kwargs) -> None:
        print(message, file=sys.stderr, **kwargs)

    try:
        if args.output != '-':
            check_output_path(args.output)
        world, camera, settings = load_world(args)
    except ConfigurationError as e:
        report(f"Error: {e}")
        return 2

    report("=" * 60)
    report("PathForge Path Tracer")
    report("=" * 60)
    report("Render Settings:")
    report(f"  Resolution: {settings.width}x{settings.height}")
    report(f"  Samples: {settings.samples_per_pixel}")
    report(f"  Max Depth: {settings.max_depth}")
    report(f"  Threads: {settings.num_threads}")
    report(f"  Seed: {settings.seed}")
    report(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '#' * filled + '.' * (bar_len - filled)
            report(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    report("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    report(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        report(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    if args.output == '-':
        write_ppm(image, sys.stdout)
        sys.stdout.flush()
    else:
        report(f"\nSaving to: {args.output}")
        save_image(image, args.output)

    report("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
