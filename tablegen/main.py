import sys

from loguru import logger

from tablegen import adapter, cli, data


def main(argv: list[str] | None = None) -> None:
    try:
        if not getattr(sys, "frozen", False):
            logger.remove()
            logger.add(sys.stderr, level="INFO")

        log_folder = adapter.fs.get_log_folder()
        if isinstance(log_folder, data.Error):
            logger.error(f"An error occurred while looking up log folder: {log_folder!s}")
        else:
            logger.add(log_folder / "error.log", rotation="5 MB", retention="7 days", level="ERROR")

        parser = cli.create_parser()
        args = cli.parse_args(parser.parse_args(sys.argv[1:] if argv is None else argv))
        if isinstance(args, data.Error):
            logger.error(str(args))
            sys.exit(1)

        result = cli.run(args)
        if isinstance(result, data.Error):
            logger.error(str(result))
            sys.exit(1)

        print(result)
    except Exception as e:
        logger.exception(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
