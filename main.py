from basketballShotCoach import logger
from basketballShotCoach.pipeline.stage_01_shot_analysis import ShotAnalysisPipeline


def run_stage(stage_name: str, PipelineCls):
    logger.info(f">>> stage {stage_name} started. <<<")
    try:
        obj = PipelineCls()
        obj.main()
        logger.info(f">>> stage {stage_name} finished. <<<")
    except Exception as e:
        logger.exception(e)
        raise

def main():
    run_stage("Shot Analysis", ShotAnalysisPipeline)

if __name__ == "__main__":
    main()
