# cli.py - interactive catalog console
import os
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.pycatalog import CatalogClient, CategoryNotFoundError

console = Console()
c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:8085"))


status_message = "Ready"
category_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_categories(categories: List[Dict[str, Any]]):
    if not categories:
        console.print("[italic yellow]No categories found[/italic yellow]")
        return

    table = Table(
        title="🏷️ Categories",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
    )
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Name", style="bold", width=30)

    for cat in categories:
        table.add_row(str(cat.get("id", "N/A")), cat.get("name", "N/A"))
    console.print(table)


def show_products(products: List[Dict[str, Any]], title: str = "📦 Products"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Category", width=20)

    for p in products:
        category = p.get("category") or {}
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name", "N/A"),
            # price arrives as a decimal string; print it verbatim
            f"${p.get('price', '0.00')}",
            f"{category.get('name', 'N/A')} (#{category.get('id', '?')})",
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the decoded result, or None after printing the error.
    """
    global status_message, category_cache
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except CategoryNotFoundError as e:
        # the cached ids are stale; reload them on the next prompt
        category_cache = []
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


# ---------------------------
# Input helpers
# ---------------------------
def get_category_completer():
    global category_cache
    if not category_cache:
        category_cache = try_api(c.list_categories) or []
    return WordCompleter([str(cat["id"]) for cat in category_cache], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def parse_price(raw: str) -> Optional[Decimal]:
    """Read a non-negative price with at most two decimals, or None."""
    try:
        value = Decimal(raw.strip().replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0 or value.as_tuple().exponent < -2:
        return None
    return value


def ask_price(message: str, default: str = "10.00") -> Decimal:
    while True:
        value = parse_price(Prompt.ask(message, default=default))
        if value is not None:
            return value
        console.print("[red]Please enter a non-negative amount with at most two decimals.[/red]")


def ask_category_id() -> int:
    raw = prompt_with_autocomplete("Enter category ID", completer=get_category_completer())
    try:
        return int(raw.strip())
    except ValueError:
        return IntPrompt.ask("Category ID must be a number, try again")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🗂️ PyCatalog SDK",
        "[bold blue]Catalog CLI with Autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, category_cache

    console.clear()
    console.print(create_header())

    category_cache = try_api(c.list_categories) or []

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=34)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=34)

        options = [
            ("1", "🏷️ List categories", "4", "📂 List products of a category"),
            ("2", "➕ Create category", "5", "➕ Create product in category"),
            ("3", "📦 List all products", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 6)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            categories = try_api(c.list_categories, success_msg="Categories loaded")
            if categories is not None:
                category_cache = categories
                show_categories(categories)

        elif choice == "2":
            name = prompt_with_autocomplete("Enter category name")
            resp = try_api(c.create_category, name, success_msg=f"Category '{name}' created")
            if resp:
                console.print(Panel(f"Created category: [green]#{resp['id']}[/green]"))
                category_cache = try_api(c.list_categories) or []

        elif choice == "3":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products)

        elif choice == "4":
            category_id = ask_category_id()
            products = try_api(c.list_category_products, category_id,
                               success_msg=f"Products of category #{category_id} loaded")
            if products is not None:
                show_products(products, title=f"📂 Category #{category_id}")

        elif choice == "5":
            category_id = ask_category_id()
            name = prompt_with_autocomplete("Enter product name")
            price = ask_price("💰 Price")
            via = "query" if Confirm.ask("Use the /products?categoryId= endpoint?", default=False) else "path"
            resp = try_api(c.create_product, category_id, name, price, via=via,
                           success_msg=f"Product '{name}' created")
            if resp:
                show_products([resp], title="✅ Created")

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thank you for using PyCatalog! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
