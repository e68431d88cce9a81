import sys

from mcp_filesystem.main import main

sys.exit(main())
