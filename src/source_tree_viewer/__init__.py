def main() -> None:
    """Entry point for the terminal viewer."""
    from source_tree_viewer.tui import main as tui_main

    tui_main()
