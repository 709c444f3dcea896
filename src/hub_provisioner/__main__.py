import sys

from hub_provisioner.provisioner import main

sys.exit(main())
