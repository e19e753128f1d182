import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
import typer

from lease_abstraction.agents import PydanticAIBackend
from lease_abstraction.assembler import DocumentTextAssembler, text_cache
from lease_abstraction.config import get_default_config
from lease_abstraction.documents import DocumentSet, SourceDocument
from lease_abstraction.export import to_excel, to_json
from lease_abstraction.orchestrator import ExtractionOrchestrator
from lease_abstraction.qa import QuestionAnswerer

load_dotenv()


app = typer.Typer(add_completion=False)


def _setup_logging(log_level: str, log_path: Optional[Path] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=handlers,
    )


def _load_documents(files: List[Path]) -> DocumentSet:
    documents = DocumentSet(cache=text_cache)
    for notice in documents.add(SourceDocument.from_path(path) for path in files):
        typer.echo(notice, err=True)
    if not len(documents):
        typer.echo("Please upload one or more lease documents.", err=True)
        raise typer.Exit(code=1)
    return documents


@app.command()
def abstract(
    files: List[Path] = typer.Argument(..., help="Lease PDFs in chronological order"),
    output: Path = typer.Option(
        Path("Lease_Abstract.xlsx"),
        "--output",
        "-o",
        help="Output Excel file path",
    ),
    json_output: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Also write the abstract as JSON",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name, e.g. gpt-4o or google-gla:gemini-2.5-flash",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Extract a lease abstract from a lease and its amendments.
    """
    log_path = output.with_suffix(".log")
    _setup_logging(log_level, log_path)
    logger = logging.getLogger(__name__)
    logger.info("Logging to %s", log_path)

    config = get_default_config()
    documents = _load_documents(files)
    orchestrator = ExtractionOrchestrator(
        backend=PydanticAIBackend(model or config.model_name),
        assembler=DocumentTextAssembler(config=config),
    )
    run = orchestrator.process(documents.documents, on_progress=typer.echo)

    if run.record:
        to_excel(run.record, output)
        typer.echo(f"Wrote abstract to {output}")
        if json_output is not None:
            to_json(run.record, json_output)
            typer.echo(f"Wrote abstract to {json_output}")
    if run.status != "ok":
        typer.echo(run.error, err=True)
        raise typer.Exit(code=1)


@app.command()
def ask(
    files: List[Path] = typer.Argument(..., help="Lease PDFs in chronological order"),
    questions: List[str] = typer.Option(
        [],
        "--question",
        "-q",
        help="Question to answer; prompts interactively when omitted",
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model name"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    """
    Answer free-form questions about the lease documents.
    """
    _setup_logging(log_level)
    config = get_default_config()
    documents = _load_documents(files)
    answerer = QuestionAnswerer(
        backend=PydanticAIBackend(model or config.model_name),
        assembler=DocumentTextAssembler(config=config),
    )

    def answer(question: str) -> None:
        reply = answerer.ask(documents.documents, question)
        if reply is None:
            if answerer.notice:
                typer.echo(answerer.notice, err=True)
            return
        typer.echo(reply)

    if questions:
        for question in questions:
            typer.echo(f"> {question}")
            answer(question)
        return

    while True:
        question = typer.prompt("Question (blank to quit)", default="", show_default=False)
        if not question.strip():
            break
        answer(question)


def main():
    app()


if __name__ == "__main__":
    main()
