from datetime import timedelta

# Deployment tags
LAUNCHER_TAG = "unreal_deployment_launcher"
SIM_PLAYER_DEPLOYMENT_TAG = "simulated_players"
# Lets simulated players log in with tokens generated through anonymous auth
DEV_LOGIN_TAG = "dev_login"

# Worker that spawns and drives the simulated players
COORDINATOR_WORKER_NAME = "SimulatedPlayerCoordinator"

# Coordinator worker flags
DEV_AUTH_TOKEN_FLAG = "simulated_players_dev_auth_token"
TARGET_DEPLOYMENT_FLAG = "simulated_players_target_deployment"
NUM_SIMULATED_PLAYERS_FLAG = "total_num_simulated_players"
TARGET_DEPLOYMENT_READY_FLAG = "target_deployment_ready"

# Compact launch configs keep the load balancer layout as a JSON string flag
LOADBALANCER_CONFIG_FLAG = "loadbalancer_v2_config_json"
COMPACT_LAUNCH_CONFIG_SUFFIX = ".pb.json"

# Development authentication tokens
DEV_AUTH_TOKEN_LIFETIME = timedelta(days=7)
DEV_AUTH_TOKEN_DESCRIPTION = "DAT for simulated player deployment."

# Listing
LIST_PAGE_SIZE = 50

# Snapshot upload
SERVER_SIDE_ENCRYPTION_HEADER = "x-amz-server-side-encryption"
SERVER_SIDE_ENCRYPTION_VALUE = "AES256"
