from aiscript_lsp.server import main

main()
