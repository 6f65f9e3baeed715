# cli.py
import asyncio
import sys
from datetime import datetime
from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from prompt_toolkit.validation import Validator

from perla.config import settings, setup_logging
from perla.core import MutationResult, MutationStatus, normalize_category
from perla.models import CATEGORIES, InventoryItem
from perla.state import InventoryState
from perla.storeclient import DocumentStoreClient

console = Console()
loop = asyncio.new_event_loop()

state = InventoryState(
    DocumentStoreClient(),
    serialize_mutations=settings.serialize_mutations,
)

status_message = "Ready"

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_inventory(items: Iterable[InventoryItem], title: str = "📦 Lista de Inventario"):
    if not state.is_logged_in:
        console.print("[italic yellow]Inicie sesión para ver y gestionar el inventario.[/italic yellow]")
        return

    items = list(items)
    if not items:
        console.print("[italic grey50]No hay artículos en el inventario.[/italic grey50]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("Nombre", style="bold", width=24)
    table.add_column("Categoría", width=14)
    table.add_column("Cantidad", justify="right", width=10)
    table.add_column("Fecha Ingreso", width=14)
    table.add_column("ID", style="dim", width=15)

    for item in items:
        qty_style = "bold red" if item.is_low_stock else "green"
        table.add_row(
            item.name,
            item.category,
            f"[{qty_style}]{item.quantity}[/{qty_style}]",
            item.date_added,
            str(item.id),
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def report(result: MutationResult, success_msg: str):
    """Turns a mutation result into the status line the user sees."""
    global status_message
    if result.status is MutationStatus.OK:
        status_message = success_msg
    elif result.status is MutationStatus.SKIPPED:
        status_message = "Error: inicie sesión primero"
    elif result.status is MutationStatus.VALIDATION_ERROR:
        status_message = "Error: Por favor, complete todos los campos correctamente"
        for err in result.errors:
            console.print(f"[red]  • {err}[/red]")
    else:
        status_message = "Error: " + "; ".join(result.errors)
    console.print(show_status(status_message, result.ok))


# ---------------------------
# Event loop bridge
# ---------------------------
def run(coro):
    """Runs a state coroutine with a spinner while the store answers."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return loop.run_until_complete(coro)


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_category_completer():
    return WordCompleter(list(CATEGORIES), ignore_case=True)


category_validator = Validator.from_callable(
    lambda text: normalize_category(text) is not None,
    error_message="Seleccione: " + ", ".join(CATEGORIES),
    move_cursor_to_end=True,
)


def get_id_completer():
    return WordCompleter([str(i.id) for i in state.items], ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    session = (
        "[green]Sesión: Admin[/green]" if state.is_logged_in else "[red]Sesión: cerrada[/red]"
    )
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🗃️ Perla Inventory App",
        session,
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = "", validator=None):
    return prompt(
        f"{message} ", completer=completer, style=custom_style, default=default, validator=validator
    )


# ---------------------------
# Actions
# ---------------------------
def add_item_form():
    name = prompt_with_autocomplete("Nombre del Artículo")
    category = prompt_with_autocomplete(
        "Categoría", completer=get_category_completer(), validator=category_validator
    )
    quantity = prompt_with_autocomplete("Cantidad")
    result = run(state.add_item(name, category, quantity))
    report(result, f"Artículo '{name.strip()}' agregado")
    if result.ok:
        show_inventory(state.items)


def remove_item_prompt():
    global status_message
    raw = prompt_with_autocomplete("ID del artículo", completer=get_id_completer()).strip()
    try:
        item_id = int(raw)
    except ValueError:
        status_message = f"Error: '{raw}' no es un ID válido"
        console.print(show_status(status_message, False))
        return
    result = run(state.remove_item(item_id))
    if result.ok and result.item is None:
        status_message = f"Error: Artículo {item_id} no encontrado"
        console.print(show_status(status_message, False))
        return
    report(result, f"Artículo {item_id} eliminado")
    if result.ok:
        show_inventory(state.items)


def filter_prompt():
    query = prompt_with_autocomplete("Filtrar por Nombre/Categoría/Cantidad")
    show_inventory(state.filtered(query), title=f"🔍 Resultados para '{query}'")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    loaded = run(state.initialize())
    if loaded.unavailable:
        status_message = "Error: no se pudo leer el inventario, iniciando vacío"
    console.print(create_header())

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        auth_label = "🔒 Cerrar Sesión (Admin)" if state.is_logged_in else "🔑 Iniciar Sesión (Mock)"
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", auth_label, "4", "🔍 Filtrar inventario"),
            ("2", "📦 Ver inventario", "5", "➖ Eliminar artículo"),
            ("3", "➕ Añadir al Inventario", "q", "👋 Salir"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menú", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nElija una opción",
            completer=WordCompleter(["1", "2", "3", "4", "5", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            logged_in = state.toggle_session()
            status_message = "Sesión iniciada" if logged_in else "Sesión cerrada"
            console.print(create_header())

        elif choice == "2":
            show_inventory(state.items)

        elif choice == "3":
            add_item_form()

        elif choice == "4":
            filter_prompt()

        elif choice == "5":
            remove_item_prompt()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("¿Seguro que desea salir?"):
                run(state.store.aclose())
                console.print(Panel.fit("[bold green]¡Hasta luego! 👋[/bold green]", title="Adiós"))
                return

        console.print()
        console.rule(style="dim")


def main() -> int:
    setup_logging()
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        return 1
    finally:
        loop.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
