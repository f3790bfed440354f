#!/usr/bin/env python3
"""
Kannada Converter CLI - convert between legacy Nudi/Baraha text and Unicode Kannada

Input comes from --text, from one or more UTF-8 files, or from stdin.
Converted text is printed, or written next to each input name in --output-dir.

Requirements:
- click, python-dotenv, tqdm
"""

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from tqdm import tqdm

from .ascii_unicode_converter import KannadaAsciiFormat, KannadaConverter, print_conversion_report
from .errors import ConversionError
from .mapping_loader import load_mapping_tables

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _convert_text(converter: KannadaConverter, text: str, to_unicode: bool,
                  ascii_format: KannadaAsciiFormat, report: bool) -> str:
    if to_unicode and ascii_format is KannadaAsciiFormat.DEFAULT:
        return text

    if report:
        result = converter.convert_with_report(text, to_unicode=to_unicode)
        print_conversion_report(result)
        return result.converted_text

    if to_unicode:
        return converter.convert(text, ascii_format)
    return converter.unicode_to_ascii(text)


def _output_path(output_dir: Path, input_file: Path, to_unicode: bool) -> Path:
    suffix = 'unicode' if to_unicode else 'ascii'
    return output_dir / f"{input_file.stem}.{suffix}.txt"


@click.command()
@click.argument('files', nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--text', 'text', default=None, help='Convert this text instead of files or stdin')
@click.option('--to-unicode/--to-ascii', default=True, help='Conversion direction (default: to Unicode)')
@click.option('--format', 'ascii_format', default='nudi',
              type=click.Choice(['default', 'nudi', 'baraha'], case_sensitive=False),
              help='Legacy format of the input (default: nudi; "default" leaves text unchanged)')
@click.option('--output-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Write <name>.unicode.txt / <name>.ascii.txt files here instead of printing')
@click.option('--mapping-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Mapping JSON to use (default: KANNADA_MAPPING_FILE or bundled tables)')
@click.option('--kannada-digits/--english-digits', default=None,
              help='Convert ASCII digits to Kannada digits (default: KANNADA_DIGITS or false)')
@click.option('--report', is_flag=True, help='Print a conversion report for each input')
@click.option('--env-file', default='.env', help='Path to environment file (default: .env)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(files, text, to_unicode, ascii_format, output_dir, mapping_file, kannada_digits,
         report, env_file, verbose):
    """
    Convert Kannada text between legacy Nudi/Baraha fonts and Unicode.

    Examples:

        kannada-convert --text 'PÀ£ÀßqÀ'

        kannada-convert --to-ascii --text 'ಕನ್ನಡ'

        kannada-convert --output-dir out/ chapter1.txt chapter2.txt
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_dotenv(env_file)

    try:
        tables = load_mapping_tables(mapping_file=mapping_file, kannada_digits=kannada_digits)
        converter = KannadaConverter(tables)
    except ConversionError as e:
        logger.error(f"Invalid mapping configuration: {e}")
        sys.exit(1)

    fmt = KannadaAsciiFormat.parse(ascii_format)
    logger.debug(f"Direction={'to-unicode' if to_unicode else 'to-ascii'}, Format={fmt.name}")

    try:
        if text is not None or not files:
            if text is not None:
                source = text
            else:
                with click.open_file('-', encoding='utf-8') as stream:
                    source = stream.read()
            converted = _convert_text(converter, source, to_unicode, fmt, report)
            if output_dir:
                output_dir.mkdir(parents=True, exist_ok=True)
                out_file = _output_path(output_dir, Path('stdin' if text is None else 'text'), to_unicode)
                out_file.write_text(converted, encoding='utf-8')
                logger.info(f"Wrote {out_file}")
            else:
                click.echo(converted)
            return

        if output_dir:
            output_dir.mkdir(parents=True, exist_ok=True)

        iterator = tqdm(files, desc="Converting files", unit="file") if len(files) > 1 else files
        for input_file in iterator:
            content = input_file.read_text(encoding='utf-8')
            converted = _convert_text(converter, content, to_unicode, fmt, report)

            if output_dir:
                out_file = _output_path(output_dir, input_file, to_unicode)
                out_file.write_text(converted, encoding='utf-8')
                logger.info(f"Wrote {out_file}")
            else:
                click.echo(converted)

        logger.info(f"Converted {len(files)} file(s)")

    except KeyboardInterrupt:
        logger.info("Conversion interrupted by user")
        sys.exit(130)
    except (ConversionError, OSError, UnicodeDecodeError) as e:
        logger.error(f"Conversion failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
