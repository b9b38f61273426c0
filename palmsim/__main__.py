# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

"""Command line interface for running a sptPALM simulation"""
import argparse
import logging
from pathlib import Path
import sys

from . import analysis, config, io, params, sampling, sim
from .exceptions import ConfigurationError


_logger = logging.getLogger("palmsim")


def make_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="palmsim",
        description="Simulate a single particle tracking PALM experiment")
    ap.add_argument("params", help="YAML file with simulation parameters")
    ap.add_argument("outdir", help="Output directory")
    ap.add_argument("--diff1", default=None,
                    help="diffusion coefficient of population 1 (µm²/s). "
                    "Required unless given in the parameter file.")
    ap.add_argument("--diff2", default=None,
                    help="diffusion coefficient of population 2 (µm²/s)")
    ap.add_argument("--fraction", default=None,
                    help="percentage of population 1")
    ap.add_argument("--frames", default=None, help="number of frames")
    ap.add_argument("--seed", type=int, default=None,
                    help="seed for the random number generator")
    ap.add_argument("--no-movie", action="store_true",
                    help="do not render the movie")
    ap.add_argument("--preview", type=int, default=0, metavar="N",
                    help="save every N-th frame as preview.png in the "
                    "output directory while rendering")
    ap.add_argument("--parallel", action="store_true",
                    help="analyze trajectories in multiple threads")
    ap.add_argument("-v", "--verbose", action="count", default=0,
                    help="increase verbosity")
    return ap


def _preview_writer(filename: Path, every: int):
    import matplotlib.pyplot as plt

    def preview(n, img):
        if n % every == 0:
            plt.imsave(filename, img, cmap="gray")
    return preview


def _save_figure(func, filename, *args, **kwargs):
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    func(*args, ax=ax, **kwargs)
    fig.savefig(filename)
    plt.close(fig)


def run(args: argparse.Namespace):
    """Run the simulation and save all results

    Parameters
    ----------
    args
        Parsed command line arguments, see :py:func:`make_parser`.
    """
    import matplotlib
    matplotlib.use("Agg")
    from . import plot

    settings = params.load_parameters(args.params)
    diff_1 = settings.diff_1 if args.diff1 is None else args.diff1
    if args.diff2 is None and args.fraction is None:
        diff_2 = settings.diff_2 if settings.population_ratio < 1 else None
        fraction = 100 * settings.population_ratio
    else:
        diff_2 = args.diff2
        fraction = args.fraction
    p = params.SimulationParameters.from_ui(
        settings, diff_1, diff_2, fraction, args.frames)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    params.save_parameters(outdir / "params.yaml", p)

    sampler = sampling.Sampler(args.seed)
    res = sim.simulate(p, sampler)

    _logger.info("Plotting the trajectories...")
    _save_figure(plot.plot_trajectories, outdir / "Trajectories.png",
                 res.trajectories, p.image_size, p.pixel_size)

    _logger.info("Analyzing the trajectories...")
    ana = analysis.analyze_trajectories(
        res.trajectories, p.acquisition_time, p.max_blink, p.min_traj_length,
        parallel=args.parallel or None)
    with analysis.open_report(outdir / "Results.txt", ana) as fh:
        sim.report_parameters(fh, p, res.n_activated)

    _save_figure(plot.plot_lifetimes, outdir / "Trajectories_Length.png",
                 res.lifetimes)
    _save_figure(plot.plot_step_ecdf, outdir / "Cumulative_distribution.png",
                 res.step_lengths)
    io.save(outdir / "tracks.h5", res.tracks())

    if args.no_movie:
        return
    movie_dir = io.reset_dir(outdir / "Simulated_Movies")
    preview = (_preview_writer(outdir / "preview.png", args.preview)
               if args.preview > 0 else None)
    files = io.save_movie(movie_dir, sim.simulate_movie(res.detections, p,
                                                        sampler),
                          preview=preview)
    _logger.info("Wrote %i movie file(s) with up to %i frames each",
                 len(files), config.rc["frames_per_file"])


def main(argv=None) -> int:
    args = make_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s: %(message)s")
    try:
        run(args)
    except ConfigurationError as e:
        _logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
