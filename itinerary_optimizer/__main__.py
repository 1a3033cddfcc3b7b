import sys

from itinerary_optimizer.main import main

sys.exit(main())
