import argparse
import asyncio
import logging
import os
import sys

from dishka import make_async_container

from photo_export.application.exceptions import ExportError
from photo_export.application.interactors import ExportCompanyPhotosInteractor
from photo_export.config import Config
from photo_export.ioc import AppProvider


async def export_photos(config: Config, company_id: str, output: str) -> int:
    container = make_async_container(AppProvider(), context={Config: config})
    try:
        async with container() as request_container:
            interactor = await request_container.get(ExportCompanyPhotosInteractor)
            try:
                result = await interactor(company_id=company_id)
            except ExportError as e:
                print(e.message, file=sys.stderr)
                return 1

        try:
            with open(output, "wb") as out:
                async for chunk in result.archive.iter_chunks():
                    out.write(chunk)
        finally:
            result.archive.close()
    finally:
        await container.close()

    print(f"{output}: {result.entries_written} photos, {result.skipped} skipped")
    for skip in result.skips:
        print(f"  {skip.entry_name}: {skip.reason.value} {skip.detail}".rstrip())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="photo-export", description="Export a company's product photos as zip")
    parser.add_argument("company_id")
    parser.add_argument("-o", "--output", help="archive path, defaults to EXPORT_FILENAME")
    parser.add_argument("--env", default=".env", help="dotenv file with settings")
    args = parser.parse_args(argv)

    config = Config.from_env(args.env)
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(export_photos(config=config, company_id=args.company_id,
                                     output=args.output or config.export.filename))


if __name__ == "__main__":
    sys.exit(main())
