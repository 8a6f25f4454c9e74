from shared.console import DeckLabConsole
from shared.models import Finding, Severity


def test_findings_table_does_not_interpret_markup():
    console = DeckLabConsole()
    finding = Finding(
        severity=Severity.LOW,
        title="Window [/]",
        description="links [bold]X[/] at offset 0 with [/]Y at offset 9",
    )
    with console.rich.capture() as capture:
        console.findings_table([finding])
    text = capture.get()
    assert "[/]" in text
    assert "[bold]X[/]" in text


def test_findings_table_skips_empty_list():
    console = DeckLabConsole()
    with console.rich.capture() as capture:
        console.findings_table([])
    assert capture.get() == ""
