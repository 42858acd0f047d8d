import pulumi
from awsbuilder import AWSResourceBuilder
from config import load_config

DEFAULT_CONFIG_FILE = "config.yaml"

def main():
    # Load YAML configuration; a stack may point at another file
    config_file = pulumi.Config().get("configFile") or DEFAULT_CONFIG_FILE
    try:
        config = load_config(config_file)
    except Exception as e:
        pulumi.log.error(f"Failed to load configuration '{config_file}': {e}")
        raise

    builder = AWSResourceBuilder(config)

    try:
        builder.build()
    except Exception as e:
        pulumi.log.error(f"Failed during resource build: {e}")
        raise

    builder.export_outputs()

if __name__ == "__main__":
    main()
