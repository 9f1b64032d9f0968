"""Fächerzuordnung — Haupt-CLI.

Verwendung:
  python main.py setup                              Ersteinrichtung
  python main.py config show                        Konfiguration anzeigen
  python main.py generate                           Demo-Datensatz erzeugen
  python main.py validate                           Konsistenz-Check
  python main.py classes                            Klassen auflisten
  python main.py subjects <klasse> [--teacher ID]   Fächerangebot einer Klasse
  python main.py assign <klasse> phy=KIM chem=-     Lehrkräfte zuweisen / entfernen
  python main.py self-assign <klasse> <lehrer> phy  Lehrkraft trägt sich selbst ein
  python main.py add-subjects <klasse> phy chem     Fächer direkt zuordnen
  python main.py sync <klasse>                      Fehlende Fach-Zeilen anlegen
  python main.py teacher-classes <lehrer>           Klassen einer Lehrkraft
  python main.py assign-all <klasse> <lehrer>       Lehrkraft für alle Fächer setzen
  python main.py class-teachers <klasse>            Lehrkräfte einer Klasse
  python main.py authorized <lehrer> <klasse> <fach> Darf die Lehrkraft das Fach unterrichten?
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()


def _load_config():
    """Lädt die Konfiguration (ohne Datei: Standardwerte)."""
    from config.manager import ConfigManager
    return ConfigManager().load_or_default()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _data_path(ctx: click.Context) -> Path:
    return ctx.obj.get("data_path") or ctx.obj["config"].data_file


def _open_service(ctx: click.Context):
    """Öffnet den JSON-Datensatz und liefert (Repository, Service)."""
    from data.json_store import JsonFileRepository
    from resolution.service import SubjectAssignmentService

    path = _data_path(ctx)
    if not path.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {path}[/red]\n"
            "Verwenden Sie [bold]python main.py generate[/bold]."
        )
        sys.exit(1)
    repo = JsonFileRepository(path)
    config = ctx.obj["config"]
    return repo, SubjectAssignmentService.from_repository(
        repo, lock_timeout=config.lock_timeout_seconds
    )


@contextmanager
def _handle_errors():
    """Bildet Fehler der Fächerauflösung auf Meldung + Exit-Code 1 ab."""
    from resolution.errors import (
        ConcurrentModificationError,
        InvalidAssignmentError,
        NotFoundError,
    )
    try:
        yield
    except NotFoundError as e:
        console.print(f"[red]Nicht gefunden:[/red] {e}")
        sys.exit(1)
    except InvalidAssignmentError as e:
        console.print(f"[red]Ungültige Zuweisung:[/red] {e}")
        sys.exit(1)
    except ConcurrentModificationError as e:
        console.print(f"[red]Konflikt:[/red] {e}")
        sys.exit(1)


def _print_diff(before: dict, after: dict) -> None:
    from analysis.diff import diff_assignments

    diff = diff_assignments(before, after)
    if diff.is_empty():
        console.print("[dim]Keine Änderungen.[/dim]")
        return
    table = Table(title="Änderungen", box=box.ROUNDED)
    table.add_column("Fach", style="bold")
    table.add_column("Art")
    table.add_column("Vorher")
    table.add_column("Nachher")
    for c in diff.changes:
        table.add_row(c.subject_id, c.kind, c.old_teacher or "–", c.new_teacher or "–")
    console.print(table)
    console.print(f"[green]✓[/green] {diff.summary()}")


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--school-name", default=None, help="Name der Schule.")
def cmd_setup(school_name: Optional[str]):
    """Ersteinrichtung: Konfiguration mit Standardwerten anlegen."""
    from config.defaults import default_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = default_config()
    if school_name is None:
        school_name = click.prompt("Name der Schule", default=config.school_name)
    mgr.save(config.model_copy(update={"school_name": school_name}))
    console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    config = ctx.obj["config"]
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  Daten: {_data_path(ctx)}",
        title="Konfiguration",
        border_style="cyan",
    ))
    table = Table(box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("log_level", config.log_level)
    table.add_row("lock_timeout_seconds", str(config.lock_timeout_seconds))
    for k, v in config.demo.model_dump().items():
        table.add_row(f"demo.{k}", str(v))
    console.print(table)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=None, type=int, help="Zufalls-Seed (Standard: aus Config).")
@click.pass_context
def cmd_generate(ctx: click.Context, seed: Optional[int]):
    """Erzeugt einen Demo-Datensatz und speichert ihn als JSON."""
    from data.demo_data import DemoDataGenerator

    gen = DemoDataGenerator(ctx.obj["config"], seed=seed)
    data = gen.generate()
    gen.print_summary(data)

    out_path = _data_path(ctx)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.pass_context
def cmd_validate(ctx: click.Context):
    """Führt einen Konsistenz-Check auf dem Datensatz durch."""
    from analysis.consistency import ConsistencyChecker

    repo, _ = _open_service(ctx)
    console.print(f"\n{repo.data.summary()}\n")
    report = ConsistencyChecker().check(repo.data)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── KLASSEN & FÄCHER ─────────────────────────────────────────────────────────

@click.command("classes")
@click.pass_context
def cmd_classes(ctx: click.Context):
    """Listet alle Klassen mit Kombinationen auf."""
    repo, _ = _open_service(ctx)
    table = Table(title="Klassen", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Stufe")
    table.add_column("Kombinationen")
    table.add_column("Fächer", justify="right")
    for c in repo.data.classes:
        table.add_row(c.id, c.name, c.education_level.value,
                      ", ".join(c.combination_ids) or "–", str(len(c.subjects)))
    console.print(table)


@click.command("subjects")
@click.argument("class_id")
@click.option("--teacher", "teacher_id", default=None,
              help="Nur Fächer, die diese Lehrkraft unterrichten darf.")
@click.pass_context
def cmd_subjects(ctx: click.Context, class_id: str, teacher_id: Optional[str]):
    """Zeigt das effektive Fächerangebot einer Klasse."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        if teacher_id:
            subjects = service.resolve_teachable_subjects(class_id, teacher_id)
        else:
            subjects = service.resolve_effective_subjects(class_id)
        assignments = repo.get_current_assignments(class_id)

    title = f"Fächer {class_id}" + (f" für {teacher_id}" if teacher_id else "")
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Pflicht")
    table.add_column("Lehrkraft")
    for s in subjects:
        if s.id in assignments:
            teacher = assignments[s.id] or "[yellow]offen[/yellow]"
        else:
            teacher = "[dim]keine Zeile[/dim]"
        table.add_row(s.id, s.code, s.name, "✓" if s.is_compulsory else "", teacher)
    console.print(table)


# ─── ZUWEISUNGEN ──────────────────────────────────────────────────────────────

def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, Optional[str]]:
    """"phy=KIM" → {"phy": "KIM"}, "phy=-" → {"phy": None}."""
    changes: dict[str, Optional[str]] = {}
    for pair in pairs:
        subject_id, sep, teacher_id = pair.partition("=")
        if not sep or not subject_id:
            raise click.BadParameter(f"Erwartet FACH=LEHRKRAFT, erhalten: {pair!r}")
        changes[subject_id] = None if teacher_id in ("", "-") else teacher_id
    return changes


@click.command("assign")
@click.argument("class_id")
@click.argument("pairs", nargs=-1, required=True)
@click.pass_context
def cmd_assign(ctx: click.Context, class_id: str, pairs: tuple[str, ...]):
    """Weist Lehrkräfte zu (FACH=LEHRKRAFT, FACH=- entfernt die Lehrkraft)."""
    changes = _parse_pairs(pairs)
    repo, service = _open_service(ctx)
    with _handle_errors():
        before = repo.get_current_assignments(class_id)
        after = service.reconcile_and_save(class_id, changes)
    _print_diff(before, after)


@click.command("self-assign")
@click.argument("class_id")
@click.argument("teacher_id")
@click.argument("subject_ids", nargs=-1, required=True)
@click.pass_context
def cmd_self_assign(ctx: click.Context, class_id: str, teacher_id: str,
                    subject_ids: tuple[str, ...]):
    """Lehrkraft trägt sich selbst für Fächer ein (nur eigene Qualifikationen)."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        before = repo.get_current_assignments(class_id)
        after = service.self_assign(class_id, teacher_id, subject_ids)
    _print_diff(before, after)


@click.command("add-subjects")
@click.argument("class_id")
@click.argument("subject_ids", nargs=-1, required=True)
@click.pass_context
def cmd_add_subjects(ctx: click.Context, class_id: str, subject_ids: tuple[str, ...]):
    """Ordnet Fächer direkt der Klasse zu (unbesetzt)."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        before = repo.get_current_assignments(class_id)
        after = service.add_subjects(class_id, subject_ids)
    _print_diff(before, after)


@click.command("sync")
@click.argument("class_id")
@click.pass_context
def cmd_sync(ctx: click.Context, class_id: str):
    """Legt für alle Fächer des Angebots fehlende Zeilen an."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        before = repo.get_current_assignments(class_id)
        after = service.sync_effective_subjects(class_id)
    _print_diff(before, after)


@click.command("assign-all")
@click.argument("class_id")
@click.argument("teacher_id")
@click.pass_context
def cmd_assign_all(ctx: click.Context, class_id: str, teacher_id: str):
    """Setzt eine Lehrkraft für alle Fach-Zeilen der Klasse."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        before = repo.get_current_assignments(class_id)
        after = service.assign_teacher_to_all(class_id, teacher_id)
    _print_diff(before, after)


@click.command("class-teachers")
@click.argument("class_id")
@click.pass_context
def cmd_class_teachers(ctx: click.Context, class_id: str):
    """Listet die Lehrkräfte, die in einer Klasse unterrichten."""
    repo, service = _open_service(ctx)
    with _handle_errors():
        teachers = service.class_teachers(class_id)
        assignments = repo.get_current_assignments(class_id)

    if not teachers:
        console.print(f"[dim]In {class_id} ist keine Lehrkraft eingesetzt.[/dim]")
        return
    table = Table(title=f"Lehrkräfte {class_id}", box=box.ROUNDED)
    table.add_column("Kürzel", style="bold")
    table.add_column("Name")
    table.add_column("Fächer")
    for t in teachers:
        subjects = [s for s, teacher_id in assignments.items() if teacher_id == t.id]
        table.add_row(t.id, t.name, ", ".join(subjects))
    console.print(table)


@click.command("authorized")
@click.argument("teacher_id")
@click.argument("class_id")
@click.argument("subject_id")
@click.pass_context
def cmd_authorized(ctx: click.Context, teacher_id: str, class_id: str, subject_id: str):
    """Prüft, ob eine Lehrkraft ein Fach in der Klasse unterrichten darf (Exit 0/1)."""
    _, service = _open_service(ctx)
    with _handle_errors():
        allowed = service.is_teacher_authorized(teacher_id, class_id, subject_id)
    if allowed:
        console.print(f"[green]✓[/green] {teacher_id} darf {subject_id} in {class_id} unterrichten.")
    else:
        console.print(f"[red]✗[/red] {teacher_id} darf {subject_id} in {class_id} nicht unterrichten.")
    sys.exit(0 if allowed else 1)


@click.command("teacher-classes")
@click.argument("teacher_id")
@click.pass_context
def cmd_teacher_classes(ctx: click.Context, teacher_id: str):
    """Listet die Klassen, in denen eine Lehrkraft Fächer unterrichtet."""
    _, service = _open_service(ctx)
    with _handle_errors():
        classes = service.classes_for_teacher(teacher_id)

    if not classes:
        console.print(f"[dim]{teacher_id} unterrichtet in keiner Klasse.[/dim]")
        return
    table = Table(title=f"Klassen von {teacher_id}", box=box.ROUNDED)
    table.add_column("Klasse", style="bold")
    table.add_column("Fächer")
    for c in classes:
        subjects = [row.subject for row in c.subjects if row.teacher == teacher_id]
        table.add_row(c.name, ", ".join(subjects))
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--data", "data_path", type=click.Path(path_type=Path), default=None,
              help="JSON-Datensatz (Standard: data_file aus der Config).")
@click.pass_context
def cli(ctx: click.Context, data_path: Optional[Path]):
    """Fächerzuordnung für O-Level- und A-Level-Klassen.

    Starten Sie mit: python main.py setup
    """
    config = _load_config()
    _setup_logging(config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["data_path"] = data_path


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_validate)
cli.add_command(cmd_classes)
cli.add_command(cmd_subjects)
cli.add_command(cmd_assign)
cli.add_command(cmd_self_assign)
cli.add_command(cmd_add_subjects)
cli.add_command(cmd_sync)
cli.add_command(cmd_teacher_classes)
cli.add_command(cmd_assign_all)
cli.add_command(cmd_class_teachers)
cli.add_command(cmd_authorized)


if __name__ == "__main__":
    main()
