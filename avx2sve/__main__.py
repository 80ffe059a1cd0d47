from .utils.transpiler.transpiler import main

raise SystemExit(main())
