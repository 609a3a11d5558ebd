#!/usr/bin/env python3
from layoffs.orchestrator import build_parser, inspect_once, overrides_from_args, run_once
from layoffs.utils import configure_logging


def main():
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(level=args.log_level, log_dir=args.log_dir)

    if args.inspect:
        inspect_once(args.config, columns=args.inspect_columns)
        return

    run_once(args.config, overrides=overrides_from_args(args))


if __name__ == "__main__":
    main()
