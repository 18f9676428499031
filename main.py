"""
Main entry point for the patient triage fuzzy logic application.

This script initializes logging, loads the operator/engine selection from
config/fls_config.toml, builds the triage FuzzyLogicSystem and evaluates
either the patient given on the command line or the built-in default cases.

Usage:
    python main.py                          # default cases
    python main.py 7.0 38.5 95              # one patient
    python main.py --method mean_of_maximum --explain 5 37 150
"""

import argparse
import logging
import os
import sys

from casestudy.triage import DEFAULT_CASES, build_triage_system, triage_inputs, urgency_category
from fls.config import config_from_dict, read_config_data
from utils.logger import set_evaluation_index, setup_logging
from utils.profiler import CodeProfiler

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config", "fls_config.toml")


def load_config_data(path):
    """
    Loads the raw TOML configuration. A missing file yields an empty mapping
    so every default applies.
    """
    if not os.path.exists(path):
        return {}
    return read_config_data(path)


def build_parser():
    parser = argparse.ArgumentParser(description="Score patient urgency with a fuzzy logic system.")
    parser.add_argument("values", nargs="*", type=float, metavar="VALUE",
                        help="PAIN TEMPERATURE BLOOD_PRESSURE; omit to run the default cases.")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Path to the TOML configuration.")
    parser.add_argument("--method", choices=["centroid", "mean_of_maximum"],
                        help="Override the defuzzification method.")
    parser.add_argument("--engine", choices=["mamdani", "sugeno"],
                        help="Override the inference engine.")
    parser.add_argument("--explain", action="store_true",
                        help="Print fuzzification and inference results.")
    parser.add_argument("--profile", action="store_true", help="Time each evaluation.")
    parser.add_argument("--log-dir", default="logs", help="Directory for component log files.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.values and len(args.values) != 3:
        parser.error("expected exactly three values: PAIN TEMPERATURE BLOOD_PRESSURE")

    setup_logging(log_dir=args.log_dir, console_level=logging.WARNING)
    main_log = logging.getLogger("main")

    data = load_config_data(args.config)
    if args.method:
        data.setdefault("defuzzification", {})["method"] = args.method
    if args.engine:
        data.setdefault("inference", {})["engine"] = args.engine

    system = build_triage_system(config_from_dict(data))
    main_log.info("Triage system ready with %d rules.", len(system.rule_base))

    cases = [tuple(args.values)] if args.values else DEFAULT_CASES
    for i, (pain, temp, bp) in enumerate(cases, start=1):
        set_evaluation_index(i)
        inputs = triage_inputs(pain, temp, bp)

        with CodeProfiler(f"Evaluate case {i}") as profiler:
            score = system.evaluate(inputs)

        print(f"Case {i}: Pain={pain:.1f}, Temp={temp:.1f}, BP={bp:.0f} -> "
              f"Score={score:.2f} ({urgency_category(score)})")
        if args.profile:
            print(f"  Evaluation time: {profiler.elapsed_ms:.3f} ms")
        if args.explain:
            print("  Fuzzification:")
            for var_name, memberships in system.get_fuzzification_results(inputs).items():
                formatted = ", ".join(f"{k}={v:.3f}" for k, v in memberships.items())
                print(f"    {var_name}: {formatted or '-'}")
            print("  Inference:")
            for set_name, degree in system.get_inference_results(inputs).items():
                print(f"    {set_name}: {degree:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
