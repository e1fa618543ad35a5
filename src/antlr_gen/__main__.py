from antlr_gen.cli import main

raise SystemExit(main())
